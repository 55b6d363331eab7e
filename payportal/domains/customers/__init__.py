"""Customer accounts and customer authentication."""
