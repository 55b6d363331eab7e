"""Employee and admin accounts."""
