"""Final stylesheet composition from theme CSS and feature fragments."""

import posixpath
import re

from markdeck.config.models import MathOptions, RenderOptions
from markdeck.config.settings import MATH_FONT_CDN
from markdeck.extensions.emoji import emoji_css
from markdeck.extensions.fitting import FITTING_CSS
from markdeck.extensions.mathml import MathEngine
from markdeck.renderer.session import RenderSession

_FONT_FACE_RE = re.compile(r"@font-face\s*\{[^}]*\}", re.IGNORECASE)
_SRC_DECLARATION_RE = re.compile(r"(?<![\w-])src\s*:[^;}]*", re.IGNORECASE)
_URL_RE = re.compile(r"""url\(\s*(?P<quote>['"]?)(?P<url>[^'")]+?)(?P=quote)\s*\)""")


def rewrite_font_urls(css: str, font_path: str) -> str:
    """
    Point every font URL in ``@font-face`` ``src`` declarations at ``font_path``.

    Only the URLs change; file names are kept and all other CSS is left
    exactly as it was.

    Args:
        css: Stylesheet text
        font_path: Directory URL or path the fonts are served from

    Returns:
        Stylesheet with rewritten font URLs
    """
    prefix = font_path if font_path.endswith("/") else f"{font_path}/"

    def replace_url(match: re.Match[str]) -> str:
        url = match.group("url")
        if url.startswith("data:"):
            return match.group(0)
        return f"url('{prefix}{posixpath.basename(url)}')"

    def replace_src(match: re.Match[str]) -> str:
        return _URL_RE.sub(replace_url, match.group(0))

    def replace_font_face(match: re.Match[str]) -> str:
        return _SRC_DECLARATION_RE.sub(replace_src, match.group(0))

    return _FONT_FACE_RE.sub(replace_font_face, css)


def resolve_font_path(math: MathOptions, engine: MathEngine) -> str | None:
    """Font directory for the math CSS, or None to keep the engine's URLs."""
    if math.font_path is False:
        return None
    if math.font_path:
        return math.font_path
    return MATH_FONT_CDN.format(version=engine.font_version)


def math_css(math: MathOptions, engine: MathEngine) -> str:
    css = engine.css()
    font_path = resolve_font_path(math, engine)
    return rewrite_font_urls(css, font_path) if font_path else css


def build_stylesheet(
    base_css: str,
    options: RenderOptions,
    session: RenderSession,
    engine: MathEngine,
) -> str:
    """
    Prepend feature CSS to the packed theme stylesheet.

    Fragments are prepended in order: emoji (when enabled), fitting
    (always), then math (only when enabled and actually used in this
    render). Each one lands in front of everything added before it, so all
    of them precede the theme's own rules.

    Args:
        base_css: Packed theme CSS
        options: Renderer configuration
        session: Session of the render that just finished
        engine: Math engine supplying the math stylesheet

    Returns:
        Final stylesheet text
    """
    css = base_css

    def prepend(fragment: str) -> None:
        nonlocal css
        if fragment:
            css = f"{fragment}\n{css}"

    prepend(emoji_css(options.emoji))
    prepend(FITTING_CSS)

    if options.math is not None and session.math_rendered:
        prepend(math_css(options.math, engine))

    return css
