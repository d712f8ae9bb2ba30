"""Standalone HTML export of rendered decks."""

import logging
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

from markdeck.browser import observer_script
from markdeck.renderer import DeckRenderer, RenderResult

logger = logging.getLogger(__name__)

_environment = Environment(
    loader=PackageLoader("markdeck", "templates"),
    autoescape=select_autoescape(["html"]),
)


def build_document(result: RenderResult, title: str, scripts: Iterable[str] = ()) -> str:
    """Wrap rendered HTML and CSS in a complete HTML page."""
    template = _environment.get_template("deck.html")
    return template.render(title=title, html=result.html, css=result.css, scripts=list(scripts))


class DeckExporter:
    """Writes rendered decks as self-contained HTML files."""

    def __init__(self, renderer: DeckRenderer, theme: str | None = None) -> None:
        self.renderer = renderer
        self.theme = theme

    def export_file(self, source: Path, output: Path | None = None, css_only: bool = False) -> Path:
        """
        Render ``source`` and write the result.

        Args:
            source: Markdown deck
            output: Target file, defaults to the source name with .html or .css
            css_only: Write only the composed stylesheet

        Returns:
            Absolute path of the written file

        Raises:
            FileNotFoundError: If the source does not exist
            ThemeNotFoundError: If the theme is unknown
        """
        if not source.is_file():
            raise FileNotFoundError(f"Deck not found: {source}")

        result = self.renderer.render_file(source, theme=self.theme)
        target = output or source.with_suffix(".css" if css_only else ".html")
        target.parent.mkdir(parents=True, exist_ok=True)

        if css_only:
            target.write_text(result.css, encoding="utf-8")
        else:
            document = build_document(result, title=source.stem, scripts=[observer_script()])
            target.write_text(document, encoding="utf-8")

        logger.info(f"Exported {source} -> {target}")
        return target.absolute()
