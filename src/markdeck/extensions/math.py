"""Math typesetting for ``$...$`` and ``$$...$$`` spans."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as etree
from typing import Any, Mapping

from markdown import Extension, Markdown
from markdown.blockprocessors import BlockProcessor
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from markdeck.config.models import MathOptions
from markdeck.extensions.mathml import MathEngine, MathRenderError
from markdeck.renderer.registry import ContentTransform
from markdeck.renderer.session import RenderSession

logger = logging.getLogger(__name__)

# Marks a collected, not yet typeset expression; value is "inline" or "display"
SOURCE_ATTR = "data-markdeck-math"

INLINE_MATH_RE = r"(?<![\\$])\$(?![\s$])((?:\\.|[^\\$])+?)(?<!\s)\$(?!\d)"


class InlineMathProcessor(InlineProcessor):
    """Collect ``$...$`` before escapes and emphasis can touch it."""

    def handleMatch(self, m, data):  # type: ignore
        element = etree.Element("span", {SOURCE_ATTR: "inline"})
        element.text = AtomicString(m.group(1))
        return element, m.start(0), m.end(0)


class BlockMathProcessor(BlockProcessor):
    """Collect ``$$...$$`` blocks, which may span blank lines."""

    def test(self, parent, block):  # type: ignore
        return block.lstrip().startswith("$$")

    def run(self, parent, blocks):  # type: ignore
        original = list(blocks)
        body = blocks.pop(0).lstrip()[2:]
        while "$$" not in body and blocks:
            body += "\n\n" + blocks.pop(0)

        end = body.find("$$")
        if end < 0:
            # No closing delimiter: leave the text to the paragraph processor
            blocks[:] = original
            return False

        rest = body[end + 2:]
        if rest.strip():
            blocks.insert(0, rest.lstrip("\n"))

        wrapper = etree.SubElement(parent, "p", {"class": "math-block"})
        element = etree.SubElement(wrapper, "span", {SOURCE_ATTR: "display"})
        element.text = AtomicString(body[:end].strip())
        return True


class MathTreeprocessor(Treeprocessor):
    """Typeset collected expressions and record success on the session."""

    def __init__(
        self,
        md: Markdown,
        engine: MathEngine,
        options: Mapping[str, Any],
        session: RenderSession,
    ) -> None:
        super().__init__(md)
        self.engine = engine
        self.options = options
        self.session = session

    def run(self, root: etree.Element) -> None:
        for element in [el for el in root.iter() if el.get(SOURCE_ATTR) is not None]:
            display = element.attrib.pop(SOURCE_ATTR) == "display"
            source = str(element.text or "")
            try:
                markup = self.engine.render(source, display=display, options=self.options)
            except MathRenderError as e:
                logger.warning(f"Math typesetting failed, keeping source text: {e}")
                element.set("class", "math-error")
                element.text = AtomicString(source)
                continue

            element.set("class", "math math-display" if display else "math math-inline")
            element.text = self.md.htmlStash.store(markup)
            self.session.mark_math_rendered()


class MathExtension(Extension):
    """Register math syntax and the typesetting treeprocessor."""

    def __init__(
        self,
        engine: MathEngine,
        options: Mapping[str, Any],
        session: RenderSession,
        priority: float,
        **kwargs,  # type: ignore
    ) -> None:
        self.engine = engine
        self.options = options
        self.session = session
        self.priority = priority
        super().__init__(**kwargs)

    def extendMarkdown(self, md):  # type: ignore
        md.parser.blockprocessors.register(BlockMathProcessor(md.parser), "markdeck_math_block", 75)
        # Above backslash escapes (180), below code spans (190)
        md.inlinePatterns.register(InlineMathProcessor(INLINE_MATH_RE, md), "markdeck_math", 185)
        md.treeprocessors.register(
            MathTreeprocessor(md, self.engine, self.options, self.session),
            "markdeck_math",
            self.priority,
        )


class MathTransform(ContentTransform):
    name = "math"

    def __init__(self, engine: MathEngine, options: MathOptions | None) -> None:
        self.engine = engine
        self.options = options
        self.enabled = options is not None

    def extension(self, session: RenderSession, priority: float) -> Extension:
        katex_options = self.options.katex_options if self.options else {}
        return MathExtension(self.engine, katex_options, session, priority)
