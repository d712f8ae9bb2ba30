"""Command line interface for markdeck."""
