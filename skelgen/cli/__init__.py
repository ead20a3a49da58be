"""Command line interface for skelgen."""
