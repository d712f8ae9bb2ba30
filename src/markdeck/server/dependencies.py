"""Request dependencies for the preview server."""

from fastapi import Request

from markdeck.config.models import ServerConfig
from markdeck.renderer import DeckRenderer


def get_config(request: Request) -> ServerConfig:
    """Server configuration stored on the app."""
    return request.app.state.config


def get_renderer(request: Request) -> DeckRenderer:
    """Deck renderer shared by all requests."""
    return request.app.state.renderer
