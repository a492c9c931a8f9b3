"""Externally authored override files merged into per-session content."""
