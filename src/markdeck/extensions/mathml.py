"""Math engine rendering TeX to MathML with latex2mathml."""

import re
from importlib.resources import files
from typing import Any, Mapping, Protocol

import latex2mathml.converter

# KaTeX release whose web fonts the stylesheet references
KATEX_FONT_VERSION = "0.16.11"

# Nested macros are expanded at most this many times
_MAX_MACRO_PASSES = 10


class MathRenderError(Exception):
    """Raised when a single expression cannot be typeset."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{reason} in {source!r}")


class MathEngine(Protocol):
    """Typesets TeX expressions and supplies the matching stylesheet."""

    font_version: str

    def render(self, source: str, *, display: bool, options: Mapping[str, Any]) -> str: ...

    def css(self) -> str: ...


def expand_macros(source: str, macros: Mapping[str, str]) -> str:
    """Substitute user macros such as ``{"\\\\RR": "\\\\mathbb{R}"}``."""
    if not macros:
        return source
    pattern = re.compile(
        "|".join(re.escape(name) + r"(?![A-Za-z])" for name in sorted(macros, key=len, reverse=True))
    )
    for _ in range(_MAX_MACRO_PASSES):
        expanded = pattern.sub(lambda m: macros[m.group(0)], source)
        if expanded == source:
            break
        source = expanded
    return source


class MathMLEngine:
    """
    Default engine: TeX to MathML through latex2mathml.

    Recognised options: ``macros`` (mapping of command to replacement).
    Anything else is accepted and ignored.
    """

    font_version = KATEX_FONT_VERSION

    def render(self, source: str, *, display: bool, options: Mapping[str, Any]) -> str:
        tex = expand_macros(source, options.get("macros") or {})
        try:
            return latex2mathml.converter.convert(tex, display="block" if display else "inline")
        except Exception as e:  # latex2mathml errors share no common base class
            raise MathRenderError(source, str(e) or type(e).__name__) from e

    def css(self) -> str:
        return (files("markdeck") / "static" / "math.css").read_text(encoding="utf-8")
