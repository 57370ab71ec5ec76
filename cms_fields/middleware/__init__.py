"""HTTP middleware for the field API."""
