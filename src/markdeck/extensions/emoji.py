"""Emoji substitution for shortcodes and raw unicode emoji."""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from functools import lru_cache
from typing import Any, Callable, Iterable

from markdown import Extension, Markdown
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString
from pymdownx import emoji as pymdownx_emoji

from markdeck.config.models import EmojiOptions
from markdeck.renderer.registry import ContentTransform
from markdeck.renderer.session import RenderSession

EMOJI_CSS = """img.twemoji {
  height: 1em;
  margin: 0 0.05em 0 0.1em;
  vertical-align: -0.1em;
  width: 1em;
}"""

_SHORTCODE_RE = re.compile(r":[+\-\w]+:")

# Elements whose text is never scanned
_SKIP_TAGS = frozenset({"code", "pre", "kbd", "script", "style", "math"})

VARIATION_SELECTOR = "\ufe0f"

# Text-default symbols at or above U+2000 that stay text without a selector
_TEXT_DEFAULT = frozenset({"\u2122", "\u2139"})

# Every emoji sequence holds a character at or above U+2000
_CANDIDATE_RE = re.compile("[\u2000-\U0010ffff]")

Piece = str | etree.Element


@lru_cache(maxsize=1)
def emoji_index() -> dict[str, Any]:
    """The twemoji index shipped with pymdown-extensions."""
    return pymdownx_emoji.twemoji({}, None)


def _to_chars(codepoints: str) -> str:
    return "".join(chr(int(value, 16)) for value in codepoints.split("-"))


def _strip_selectors(chars: str) -> str:
    return chars.replace(VARIATION_SELECTOR, "")


def _pattern_for(key: str) -> str:
    # Text-default symbols only match when followed by a selector
    if len(key) == 1 and (ord(key) < 0x2000 or key in _TEXT_DEFAULT):
        return re.escape(key) + VARIATION_SELECTOR
    return "".join(re.escape(char) + f"{VARIATION_SELECTOR}?" for char in key)


@lru_cache(maxsize=1)
def _unicode_table() -> tuple[dict[str, str], re.Pattern[str]]:
    """
    Map emoji character sequences to shortnames, plus a matcher for them.

    Keys carry no variation selectors. The matcher accepts one after any
    character of a sequence.
    """
    table: dict[str, str] = {}
    for shortname, data in emoji_index()["emoji"].items():
        for key in ("unicode_alt", "unicode"):
            codepoints = data.get(key)
            if not codepoints:
                continue
            chars = _strip_selectors(_to_chars(codepoints))
            if len(chars) > 1 and max(map(ord, chars)) < 0x2000:
                continue
            table.setdefault(chars, shortname)
    alternatives = sorted(table, key=len, reverse=True)
    return table, re.compile("|".join(_pattern_for(chars) for chars in alternatives))


class EmojiTreeprocessor(Treeprocessor):
    """Replace emoji in text nodes with twemoji images.

    Shortcodes and unicode emoji both go through :meth:`render`, so the same
    emoji produces the same markup whichever way it was written.
    """

    def __init__(self, md: Markdown, options: EmojiOptions) -> None:
        super().__init__(md)
        self.options = options

    def render(self, shortname: str) -> etree.Element:
        index = emoji_index()
        table, _ = _unicode_table()
        # Emoji sharing a codepoint sequence render under one shortname
        canonical = _strip_selectors(_to_chars(index["emoji"][shortname]["unicode"]))
        shortname = table.get(canonical, shortname)
        data = index["emoji"][shortname]
        uc = data["unicode"]
        alt = _to_chars(data.get("unicode_alt", uc))
        return pymdownx_emoji.to_svg(
            index["name"], shortname, None, uc, alt, shortname, data.get("category"), {}, self.md
        )

    def _from_shortcode(self, text: str) -> etree.Element | None:
        index = emoji_index()
        shortname = index["aliases"].get(text, text)
        if shortname not in index["emoji"]:
            return None
        return self.render(shortname)

    def _from_unicode(self, text: str) -> etree.Element:
        table, _ = _unicode_table()
        return self.render(table[_strip_selectors(text)])

    def split(self, text: str) -> list[Piece] | None:
        """Split ``text`` into strings and emoji elements, or None if it has no emoji."""
        pieces: list[Piece] = [text]
        if self.options.shortcode:
            pieces = _expand(pieces, _SHORTCODE_RE, self._from_shortcode)
        if self.options.unicode and _CANDIDATE_RE.search(text):
            pieces = _expand(pieces, _unicode_table()[1], self._from_unicode)
        if all(isinstance(piece, str) for piece in pieces):
            return None
        return pieces

    def run(self, root: etree.Element) -> None:
        self._process(root)

    def _process(self, parent: etree.Element) -> None:
        index = 0
        if _scannable(parent.text):
            pieces = self.split(parent.text)
            if pieces:
                parent.text, nodes = _attach(pieces)
                for node in nodes:
                    parent.insert(index, node)
                    index += 1

        while index < len(parent):
            child = parent[index]
            index += 1
            if child.tag not in _SKIP_TAGS and child.get("data-markdeck-math") is None:
                self._process(child)
            if _scannable(child.tail):
                pieces = self.split(child.tail)
                if pieces:
                    child.tail, nodes = _attach(pieces)
                    for node in nodes:
                        parent.insert(index, node)
                        index += 1


def _scannable(text: str | None) -> bool:
    return bool(text) and not isinstance(text, AtomicString)


def _expand(
    pieces: Iterable[Piece],
    pattern: re.Pattern[str],
    build: Callable[[str], etree.Element | None],
) -> list[Piece]:
    result: list[Piece] = []
    for piece in pieces:
        if not isinstance(piece, str):
            result.append(piece)
            continue
        position = 0
        for match in pattern.finditer(piece):
            element = build(match.group(0))
            if element is None:
                continue
            result.append(piece[position:match.start()])
            result.append(element)
            position = match.end()
        result.append(piece[position:])
    return result


def _attach(pieces: list[Piece]) -> tuple[str, list[etree.Element]]:
    """Fold strings into the leading text and element tails."""
    lead = ""
    nodes: list[etree.Element] = []
    for piece in pieces:
        if isinstance(piece, str):
            if nodes:
                nodes[-1].tail = (nodes[-1].tail or "") + piece
            else:
                lead += piece
        else:
            nodes.append(piece)
    return lead, nodes


class EmojiExtension(Extension):
    """Register the emoji treeprocessor at a given priority."""

    def __init__(self, options: EmojiOptions, priority: float, **kwargs) -> None:  # type: ignore
        self.options = options
        self.priority = priority
        super().__init__(**kwargs)

    def extendMarkdown(self, md):  # type: ignore
        md.treeprocessors.register(
            EmojiTreeprocessor(md, self.options), "markdeck_emoji", self.priority
        )


class EmojiTransform(ContentTransform):
    name = "emoji"

    def __init__(self, options: EmojiOptions) -> None:
        self.options = options
        self.enabled = options.enabled

    def extension(self, session: RenderSession, priority: float) -> Extension:
        return EmojiExtension(self.options, priority)


def emoji_css(options: EmojiOptions) -> str:
    """Stylesheet for emoji images, empty when emoji are off."""
    return EMOJI_CSS if options.enabled else ""
