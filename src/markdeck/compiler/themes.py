"""Theme registry and stylesheet packing."""

import re
from dataclasses import dataclass
from importlib.resources import files

from markdeck.config.models import VALID_THEMES

_THEME_META_RE = re.compile(r"/\*\s*@theme\s+([\w-]+)\s*\*/")


class ThemeNotFoundError(KeyError):
    """Raised when a theme name is not registered."""

    pass


@dataclass(frozen=True)
class Theme:
    """A named theme stylesheet."""

    name: str
    css: str


class ThemeSet:
    """Named collection of themes with a designated default."""

    def __init__(self) -> None:
        self._themes: dict[str, Theme] = {}
        self.default: Theme | None = None

    def add(self, css: str) -> Theme:
        """
        Register a theme stylesheet.

        The name comes from a ``/* @theme name */`` comment in the CSS.
        Adding a theme under an existing name replaces it.

        Raises:
            ValueError: If the CSS carries no ``@theme`` comment
        """
        match = _THEME_META_RE.search(css)
        if not match:
            raise ValueError("Theme CSS must declare its name with /* @theme <name> */")
        theme = Theme(name=match.group(1), css=css)
        self._themes[theme.name] = theme
        return theme

    def get(self, name: str) -> Theme | None:
        return self._themes.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._themes)

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def __len__(self) -> int:
        return len(self._themes)

    def pack(self, name: str | None = None, before: str = "", after: str = "") -> str:
        """
        Combine a theme's CSS with surrounding fragments.

        Args:
            name: Theme to pack, or None for the default theme
            before: CSS placed ahead of the theme (lower precedence)
            after: CSS placed behind the theme

        Returns:
            Packed stylesheet text

        Raises:
            ThemeNotFoundError: If the theme is unknown or no default is set
        """
        theme = self.default if name is None else self._themes.get(name)
        if theme is None:
            raise ThemeNotFoundError(name or "default")
        return "\n".join(part for part in (before, theme.css, after) if part)


def load_builtin_theme(name: str) -> str:
    """Read a packaged theme stylesheet."""
    return (files("markdeck") / "themes" / f"{name}.css").read_text(encoding="utf-8")


def register_builtin_themes(theme_set: ThemeSet) -> None:
    """Add the bundled themes and make ``default`` the default one."""
    for name in VALID_THEMES:
        theme = theme_set.add(load_builtin_theme(name))
        if name == "default":
            theme_set.default = theme
