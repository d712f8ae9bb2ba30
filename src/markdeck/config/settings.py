"""Application settings and configuration."""

import os

# Default settings
DEFAULT_HOST = os.getenv("MARKDECK_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("MARKDECK_PORT", "8000"))
DEFAULT_THEME = os.getenv("MARKDECK_THEME", "default")
DEFAULT_LOG_LEVEL = os.getenv("MARKDECK_LOG_LEVEL", "INFO")

# Slide viewport used by the inline SVG wrapper
SLIDE_WIDTH = 1280
SLIDE_HEIGHT = 720

# Remote location of the math web fonts, formatted with the font version
MATH_FONT_CDN = "https://cdn.jsdelivr.net/npm/katex@{version}/dist/fonts/"


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_THEME",
    "DEFAULT_LOG_LEVEL",
    "SLIDE_WIDTH",
    "SLIDE_HEIGHT",
    "MATH_FONT_CDN",
]
