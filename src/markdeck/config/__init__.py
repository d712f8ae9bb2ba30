"""Configuration models and defaults for markdeck."""
