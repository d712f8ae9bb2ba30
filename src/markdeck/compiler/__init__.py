"""Base slide compiler for markdeck."""

from .slides import SlideCompiler, escape_code
from .themes import Theme, ThemeNotFoundError, ThemeSet, register_builtin_themes

__all__ = [
    "SlideCompiler",
    "Theme",
    "ThemeNotFoundError",
    "ThemeSet",
    "escape_code",
    "register_builtin_themes",
]
