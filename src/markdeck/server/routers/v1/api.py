"""API router for JSON endpoints.

This router renders Markdown posted by clients and lists the themes the
renderer knows about.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from markdeck.compiler import ThemeNotFoundError
from markdeck.renderer import DeckRenderer
from markdeck.server.dependencies import get_renderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


class RenderRequest(BaseModel):
    """Markdown to render and an optional theme name."""

    markdown: str
    theme: str | None = None


@router.post("/render")
def api_render(
    payload: RenderRequest,
    renderer: DeckRenderer = Depends(get_renderer),
) -> dict[str, str]:
    """Render a Markdown deck to HTML and CSS.

    Args:
        payload: Markdown source and theme
        renderer: Deck renderer (injected)

    Returns:
        Rendered ``html`` and ``css``

    Raises:
        HTTPException: If the theme is unknown
    """
    try:
        result = renderer.render(payload.markdown, theme=payload.theme)
    except ThemeNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown theme: {payload.theme}")

    return {"html": result.html, "css": result.css}


@router.get("/themes")
async def api_themes(
    renderer: DeckRenderer = Depends(get_renderer),
) -> dict[str, Any]:
    """List registered themes.

    Args:
        renderer: Deck renderer (injected)

    Returns:
        Theme names and the default theme name
    """
    theme_set = renderer.theme_set
    return {
        "themes": theme_set.names,
        "default": theme_set.default.name if theme_set.default else None,
    }
