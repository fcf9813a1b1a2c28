"""Session export formats."""
