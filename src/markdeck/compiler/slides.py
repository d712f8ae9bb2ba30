"""Base slide compiler: Markdown parser setup, slide sections and fences."""

import re
import xml.etree.ElementTree as etree
from html import escape
from typing import Callable

import markdown
from markdown import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from markdeck.compiler.themes import ThemeSet
from markdeck.config.settings import SLIDE_HEIGHT, SLIDE_WIDTH

HighlightFunc = Callable[[str, str], str]

# Layout rules shared by every theme
LAYOUT_CSS = f"""div.markdeck > section,
div.markdeck > svg > foreignObject > section {{
  box-sizing: border-box;
  height: {SLIDE_HEIGHT}px;
  overflow: hidden;
  position: relative;
  width: {SLIDE_WIDTH}px;
}}
div.markdeck > svg[data-markdeck-svg] {{ display: block; }}"""


def escape_code(code: str, language: str) -> str:
    """Highlight hook that only escapes the code."""
    return escape(code, quote=False)


class FencePreprocessor(Preprocessor):
    """Replace fenced code blocks with highlighted, stashed HTML."""

    FENCE_RE = re.compile(
        r"""
        (?P<fence>^(?P<char>[`~])(?P=char){2,})[ ]*  # opening fence
        (?P<lang>[\w#.+-]*)[^\n]*\n        # language, rest of info string ignored
        (?P<code>.*?)(?<=\n)
        (?P=fence)(?P=char)*[ ]*$          # closing fence, at least as long
        """,
        re.MULTILINE | re.DOTALL | re.VERBOSE,
    )

    def __init__(self, md: markdown.Markdown, highlight: HighlightFunc) -> None:
        super().__init__(md)
        self.highlight = highlight

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        while True:
            match = self.FENCE_RE.search(text)
            if not match:
                break
            lang = match.group("lang")
            code = self.highlight(match.group("code"), lang)
            css_class = f' class="language-{escape(lang)}"' if lang else ""
            placeholder = self.md.htmlStash.store(f"<pre><code{css_class}>{code}</code></pre>")
            text = f"{text[:match.start()]}\n{placeholder}\n{text[match.end():]}"
        return text.split("\n")


class SlideTreeprocessor(Treeprocessor):
    """Split the document at top-level rules into numbered slide sections."""

    def __init__(self, md: markdown.Markdown, inline_svg: bool) -> None:
        super().__init__(md)
        self.inline_svg = inline_svg

    def run(self, root: etree.Element) -> None:
        slides: list[list[etree.Element]] = [[]]
        for child in list(root):
            root.remove(child)
            if child.tag == "hr":
                slides.append([])
            else:
                slides[-1].append(child)

        deck = etree.SubElement(root, "div", {"class": "markdeck"})
        for number, elements in enumerate(slides, start=1):
            section = etree.Element("section", {"id": str(number)})
            section.extend(elements)
            if self.inline_svg:
                svg = etree.SubElement(
                    deck,
                    "svg",
                    {"data-markdeck-svg": "", "viewBox": f"0 0 {SLIDE_WIDTH} {SLIDE_HEIGHT}"},
                )
                frame = etree.SubElement(
                    svg,
                    "foreignObject",
                    {"width": str(SLIDE_WIDTH), "height": str(SLIDE_HEIGHT)},
                )
                frame.append(section)
            else:
                deck.append(section)
        deck.tail = "\n"


class SlideExtension(Extension):
    """Register fences, slide sections and the raw HTML policy."""

    def __init__(self, compiler: "SlideCompiler", **kwargs) -> None:  # type: ignore
        self.compiler = compiler
        super().__init__(**kwargs)

    def extendMarkdown(self, md):  # type: ignore
        """Register processors on the Markdown instance."""
        md.preprocessors.register(
            FencePreprocessor(md, lambda code, lang: self.compiler.highlight(code, lang)),
            "markdeck_fence",
            25,  # Ahead of raw HTML block detection
        )
        md.treeprocessors.register(
            SlideTreeprocessor(md, self.compiler.inline_svg),
            "markdeck_slides",
            2,  # After content transforms, before unescape
        )
        if not self.compiler.html:
            # Without these, tags stay text and get escaped on output
            md.preprocessors.deregister("html_block", strict=False)
            md.inlinePatterns.deregister("html", strict=False)


class SlideCompiler:
    """Turns Markdown into slide sections and packs theme CSS."""

    def __init__(
        self,
        *,
        html: bool = False,
        inline_svg: bool = True,
        breaks: bool = True,
        linkify: bool = True,
        highlight: HighlightFunc | None = None,
    ) -> None:
        self.html = html
        self.inline_svg = inline_svg
        self.breaks = breaks
        self.linkify = linkify
        self.highlight: HighlightFunc = highlight or escape_code
        self.theme_set = ThemeSet()

    def create_markdown(self) -> markdown.Markdown:
        """Create a Markdown instance with the core syntax extensions."""
        extensions = [
            "markdown.extensions.tables",
            "markdown.extensions.sane_lists",
        ]
        if self.breaks:
            extensions.append("markdown.extensions.nl2br")
        if self.linkify:
            extensions.append("pymdownx.magiclink")
        return markdown.Markdown(extensions=extensions, output_format="html")

    def extend_markdown(self, md: markdown.Markdown) -> None:
        """Apply the compiler's own processors to ``md``."""
        md.registerExtensions([SlideExtension(self)], {})

    def pack_theme(self, name: str | None = None, before: str = "") -> str:
        """Pack a theme with the shared layout rules."""
        prefix = "\n".join(part for part in (before, LAYOUT_CSS) if part)
        return self.theme_set.pack(name, before=prefix)

    def render(self, text: str, theme: str | None = None) -> tuple[str, str]:
        """Render without any content transforms."""
        md = self.create_markdown()
        self.extend_markdown(md)
        return md.convert(text), self.pack_theme(theme)
