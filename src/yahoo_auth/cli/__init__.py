"""Command-line interface for the Yahoo provider."""
