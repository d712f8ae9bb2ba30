"""FastAPI application factory."""

import logging
from importlib.resources import files

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from markdeck import __version__, browser
from markdeck.compiler import ThemeNotFoundError
from markdeck.config.models import ServerConfig
from markdeck.renderer import DeckRenderer
from markdeck.server.dependencies import get_config
from markdeck.server.routers.v1 import api

logger = logging.getLogger(__name__)

# One browser host per process, shared by every app instance
PREVIEW_HOST = browser.PageHost()


def create_app(config: ServerConfig) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        config: Server configuration

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="markdeck",
        description="Markdown slide deck preview server",
        version=__version__,
    )

    app.state.config = config
    app.state.renderer = DeckRenderer(config.render_options)
    app.state.templates = Jinja2Templates(directory=str(files("markdeck") / "templates"))

    browser.install_host(PREVIEW_HOST)
    DeckRenderer.ready()

    app.include_router(api.router)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):  # type: ignore
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        # Decks embed their scripts and styles; fonts and emoji come from jsDelivr
        response.headers[
            "Content-Security-Policy"
        ] = "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; img-src 'self' data: https:; font-src 'self' data: https://cdn.jsdelivr.net"

        if "text/html" in response.headers.get("content-type", ""):
            # Always re-render on reload
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"

        return response

    @app.get("/", response_class=HTMLResponse)
    def root(request: Request) -> Response:
        """Serve the rendered deck."""
        deck_path = app.state.config.deck_path
        templates = app.state.templates

        try:
            result = app.state.renderer.render_file(deck_path, theme=app.state.config.theme)
        except FileNotFoundError:
            logger.warning(f"Deck not found: {deck_path}")
            return HTMLResponse(f"Deck not found: {deck_path.name}", status_code=404)
        except ThemeNotFoundError:
            return HTMLResponse(f"Unknown theme: {app.state.config.theme}", status_code=400)

        return templates.TemplateResponse(
            request=request,
            name="deck.html",
            context={
                "title": deck_path.stem,
                "html": result.html,
                "css": result.css,
                "scripts": list(PREVIEW_HOST.scripts.values()),
            },
        )

    @app.get("/raw")
    def get_raw_content(config: ServerConfig = Depends(get_config)) -> Response:
        """Get the raw Markdown of the served deck."""
        deck_path = config.deck_path
        try:
            content = deck_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Response("Deck not found", status_code=404, media_type="text/plain")

        return Response(
            content=content,
            media_type="text/plain; charset=utf-8",
            headers={"Content-Disposition": f'inline; filename="{deck_path.name}"'},
        )

    return app
