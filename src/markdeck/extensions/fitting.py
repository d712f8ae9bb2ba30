"""Auto-fitting headings marked with a ``<!-- fit -->`` comment."""

from __future__ import annotations

import xml.etree.ElementTree as etree

from markdown import Extension, Markdown
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor

from markdeck.renderer.registry import ContentTransform
from markdeck.renderer.session import RenderSession

FIT_COMMENT_RE = r"<!--\s*fit\s*-->"
FIT_MARKER_ATTR = "data-markdeck-fit"

HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

FITTING_CSS = """svg[data-markdeck-fitting='svg'] {
  display: block;
  height: auto;
  max-height: 100%;
  overflow: visible;
  width: 100%;
}
[data-markdeck-fitting-svg-content] {
  display: table;
  white-space: nowrap;
}
[data-markdeck-fitting='plain'] {
  display: block;
  white-space: nowrap;
}"""


class FitCommentProcessor(InlineProcessor):
    """Turn the fit comment into an empty marker element."""

    def handleMatch(self, m, data):  # type: ignore
        return etree.Element("span", {FIT_MARKER_ATTR: ""}), m.start(0), m.end(0)


class FittingTreeprocessor(Treeprocessor):
    """Wrap the content of marked headings in a sizing container.

    Markers outside headings are dropped.
    """

    def __init__(self, md: Markdown, inline_svg: bool) -> None:
        super().__init__(md)
        self.inline_svg = inline_svg

    def run(self, root: etree.Element) -> None:
        fitted = []
        for parent in list(root.iter()):
            markers = [child for child in parent if child.get(FIT_MARKER_ATTR) is not None]
            for marker in markers:
                _remove_keeping_tail(parent, marker)
            if markers and parent.tag in HEADINGS:
                fitted.append(parent)

        for heading in fitted:
            self.wrap(heading)

    def wrap(self, heading: etree.Element) -> None:
        if self.inline_svg:
            container = etree.Element(
                "svg",
                {"data-markdeck-fitting": "svg", "preserveAspectRatio": "xMinYMin meet"},
            )
            frame = etree.SubElement(container, "foreignObject")
            content = etree.SubElement(frame, "span", {"data-markdeck-fitting-svg-content": ""})
        else:
            container = content = etree.Element("span", {"data-markdeck-fitting": "plain"})

        content.text = (heading.text or "").lstrip()
        heading.text = None
        for child in list(heading):
            heading.remove(child)
            content.append(child)
        heading.append(container)


def _remove_keeping_tail(parent: etree.Element, marker: etree.Element) -> None:
    position = list(parent).index(marker)
    tail = marker.tail or ""
    if position == 0:
        parent.text = (parent.text or "") + tail
    else:
        previous = parent[position - 1]
        previous.tail = (previous.tail or "") + tail
    parent.remove(marker)


class FittingExtension(Extension):
    """Register the fit comment pattern and the wrapping treeprocessor."""

    def __init__(self, inline_svg: bool, priority: float, **kwargs) -> None:  # type: ignore
        self.inline_svg = inline_svg
        self.priority = priority
        super().__init__(**kwargs)

    def extendMarkdown(self, md):  # type: ignore
        # Ahead of the raw inline HTML pattern (90)
        md.inlinePatterns.register(FitCommentProcessor(FIT_COMMENT_RE, md), "markdeck_fit", 95)
        md.treeprocessors.register(
            FittingTreeprocessor(md, self.inline_svg), "markdeck_fitting", self.priority
        )


class FittingTransform(ContentTransform):
    name = "fitting"

    def __init__(self, inline_svg: bool) -> None:
        self.inline_svg = inline_svg

    def extension(self, session: RenderSession, priority: float) -> Extension:
        return FittingExtension(self.inline_svg, priority)
