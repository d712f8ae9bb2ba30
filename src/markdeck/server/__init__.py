"""FastAPI preview server components for markdeck."""

from .app import create_app

__all__ = ["create_app"]
