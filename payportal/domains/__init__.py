"""Business domains: customers, staff and payments."""
