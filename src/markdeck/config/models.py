"""Core data models for markdeck."""

from dataclasses import dataclass, field, replace
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import Any, Literal, Mapping

from markdeck.config.settings import DEFAULT_HOST, DEFAULT_LOG_LEVEL, DEFAULT_PORT, DEFAULT_THEME

# Built-in theme names
VALID_THEMES = ["default", "gaia", "uncover"]


class ConfigError(ValueError):
    """Raised when a configuration mapping cannot be interpreted."""

    pass


@dataclass(frozen=True)
class EmojiOptions:
    """Which emoji notations are substituted."""

    shortcode: bool = True  # :heart: style shortcodes
    unicode: bool = True  # Raw unicode emoji characters

    @property
    def enabled(self) -> bool:
        return self.shortcode or self.unicode


@dataclass(frozen=True)
class MathOptions:
    """Math typesetting settings.

    ``font_path`` is tri-state: ``None`` points web fonts at the CDN,
    ``False`` leaves the engine's own URLs alone and a string replaces the
    font directory.
    """

    katex_options: Mapping[str, Any] = field(default_factory=dict)  # Opaque engine options
    font_path: str | Literal[False] | None = None

    def __post_init__(self) -> None:
        # Read-only view so a frozen instance can't be changed through the mapping
        object.__setattr__(self, "katex_options", MappingProxyType(dict(self.katex_options)))
        if isinstance(self.font_path, PurePath):
            object.__setattr__(self, "font_path", self.font_path.as_posix())


@dataclass(frozen=True)
class RenderOptions:
    """Construction-time configuration for a deck renderer."""

    html: bool = False  # Allow raw HTML passthrough
    math: MathOptions | None = field(default_factory=MathOptions)  # None disables math
    emoji: EmojiOptions = field(default_factory=EmojiOptions)
    inline_svg: bool = True  # Wrap slides (and fitted headings) in inline SVG

    def replace(self, **changes: Any) -> "RenderOptions":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "RenderOptions":
        """
        Build options from a plain mapping.

        Accepts ``html``, ``math`` (bool or mapping with ``katex_options`` and
        ``font_path``), ``emoji`` (mapping with ``shortcode``/``unicode``) and
        ``inline_svg``. Missing keys keep their defaults.

        Raises:
            ConfigError: On unknown keys or values of the wrong shape
        """
        data = dict(data or {})
        unknown = set(data) - {"html", "math", "emoji", "inline_svg"}
        if unknown:
            raise ConfigError(f"Unknown render option(s): {', '.join(sorted(unknown))}")

        math_value = data.get("math", True)
        if math_value is True:
            math: MathOptions | None = MathOptions()
        elif math_value is False or math_value is None:
            math = None
        elif isinstance(math_value, Mapping):
            extra = set(math_value) - {"katex_options", "font_path"}
            if extra:
                raise ConfigError(f"Unknown math option(s): {', '.join(sorted(extra))}")
            font_path = math_value.get("font_path")
            if font_path is True or not isinstance(font_path, (str, PurePath, type(None), bool)):
                raise ConfigError("math.font_path must be a path, false or unset")
            katex_options = math_value.get("katex_options") or {}
            if not isinstance(katex_options, Mapping):
                raise ConfigError("math.katex_options must be a mapping")
            math = MathOptions(katex_options=katex_options, font_path=font_path)
        else:
            raise ConfigError("math must be a boolean or a mapping")

        emoji_value = data.get("emoji") or {}
        if not isinstance(emoji_value, Mapping):
            raise ConfigError("emoji must be a mapping")
        extra = set(emoji_value) - {"shortcode", "unicode"}
        if extra:
            raise ConfigError(f"Unknown emoji option(s): {', '.join(sorted(extra))}")

        return cls(
            html=bool(data.get("html", False)),
            math=math,
            emoji=EmojiOptions(
                shortcode=bool(emoji_value.get("shortcode", True)),
                unicode=bool(emoji_value.get("unicode", True)),
            ),
            inline_svg=bool(data.get("inline_svg", True)),
        )


@dataclass
class ServerConfig:
    """Configuration for the preview server."""

    host: str = DEFAULT_HOST  # Bind address
    port: int = DEFAULT_PORT  # Port number
    deck_path: Path = Path("slides.md")  # Markdown deck to serve
    theme: str = DEFAULT_THEME  # Deck theme name
    open_browser: bool = True  # Auto-open browser on start
    log_level: str = DEFAULT_LOG_LEVEL  # Logging level
    render_options: RenderOptions = field(default_factory=RenderOptions)

    def validate(self) -> None:
        """Validate configuration values."""
        if not (1024 <= self.port <= 65535):
            raise ValueError("Port must be 1024-65535")
        if not self.deck_path.is_file():
            raise ValueError(f"Deck does not exist: {self.deck_path}")
        if self.theme not in VALID_THEMES:
            raise ValueError(f"Invalid theme: {self.theme}")
