"""Command-line interface for inklusi."""
