"""Command-line interface for virman."""
