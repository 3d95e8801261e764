"""Command handlers grouped by concern."""
