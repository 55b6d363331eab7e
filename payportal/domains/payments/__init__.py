"""Payment records and their review workflow."""
