"""Command-line interface for dynamic-status-list."""
