"""Slide deck rendering engine."""

import logging
from pathlib import Path
from typing import NamedTuple

import markdown

from markdeck import browser
from markdeck.compiler import SlideCompiler, ThemeSet, register_builtin_themes
from markdeck.config.models import RenderOptions
from markdeck.extensions import EmojiTransform, FittingTransform, MathMLEngine, MathTransform
from markdeck.extensions.mathml import MathEngine
from markdeck.renderer.assets import build_stylesheet
from markdeck.renderer.highlight import Highlighter, PygmentsHighlighter
from markdeck.renderer.registry import ContentTransform, TransformRegistry
from markdeck.renderer.session import RenderSession

logger = logging.getLogger(__name__)


class RenderResult(NamedTuple):
    """Rendered deck markup and its stylesheet."""

    html: str
    css: str


class DeckRenderer:
    """Renders Markdown slide decks to HTML and CSS with configured features."""

    def __init__(
        self,
        options: RenderOptions | None = None,
        *,
        highlighter: Highlighter | None = None,
        math_engine: MathEngine | None = None,
        compiler: SlideCompiler | None = None,
    ) -> None:
        """
        Initialize renderer with configuration.

        Args:
            options: Render options, defaults to ``RenderOptions()``
            highlighter: Code fence highlighter, defaults to Pygments
            math_engine: Math typesetter, defaults to latex2mathml
            compiler: Base slide compiler; its highlight hook is pointed at
                this renderer's ``highlighter``
        """
        self.options = options or RenderOptions()
        self.highlighter: Highlighter = highlighter or PygmentsHighlighter()
        self.math_engine: MathEngine = math_engine or MathMLEngine()

        self.compiler = compiler or SlideCompiler(
            html=self.options.html,
            inline_svg=self.options.inline_svg,
        )
        # Looked up per fence, so replacing self.highlighter takes effect at once
        self.compiler.highlight = lambda code, lang: self.highlighter(code, lang)

        register_builtin_themes(self.compiler.theme_set)
        self.registry = TransformRegistry(self.compiler.extend_markdown, self.create_transforms())

    def create_transforms(self) -> list[ContentTransform]:
        """Content transforms in the order they must run."""
        return [
            EmojiTransform(self.options.emoji),
            MathTransform(self.math_engine, self.options.math),
            FittingTransform(self.options.inline_svg),
        ]

    @property
    def theme_set(self) -> ThemeSet:
        return self.compiler.theme_set

    def build_markdown(self, session: RenderSession) -> markdown.Markdown:
        """Create a Markdown instance with all transforms bound to ``session``."""
        md = self.compiler.create_markdown()
        self.registry.register(md, session)
        return md

    @property
    def markdown(self) -> markdown.Markdown:
        """A fully configured Markdown instance with a throwaway session."""
        return self.build_markdown(RenderSession())

    def render(self, content: str, theme: str | None = None) -> RenderResult:
        """
        Render a Markdown deck.

        Args:
            content: Raw Markdown string
            theme: Theme name, or None for the default theme

        Returns:
            Rendered HTML and the composed stylesheet

        Raises:
            ThemeNotFoundError: If ``theme`` is not registered
        """
        session = RenderSession()
        html = self.build_markdown(session).convert(content)
        css = build_stylesheet(
            self.compiler.pack_theme(theme),
            self.options,
            session,
            self.math_engine,
        )
        logger.debug(f"Rendered deck ({len(content)} chars, math used: {session.math_rendered})")
        return RenderResult(html, css)

    def render_file(self, path: Path, theme: str | None = None) -> RenderResult:
        """Read and render a Markdown file."""
        return self.render(path.read_text(encoding="utf-8"), theme=theme)

    @staticmethod
    def ready() -> None:
        """
        Register the browser-side fitting observer once per process.

        Raises:
            HostContextError: If no browser host is installed
        """
        browser.ready()
