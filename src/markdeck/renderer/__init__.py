"""Deck rendering pipeline for markdeck."""

from .engine import DeckRenderer, RenderResult
from .highlight import Highlighter, PygmentsHighlighter
from .session import RenderSession

__all__ = ["DeckRenderer", "Highlighter", "PygmentsHighlighter", "RenderResult", "RenderSession"]
