"""HTTP API for the EdLoop application."""
