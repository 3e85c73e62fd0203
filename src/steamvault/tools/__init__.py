"""Pure helpers for filtering and tagging the catalog."""
