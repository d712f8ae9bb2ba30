"""Ordered registration of content transforms on a Markdown instance."""

import logging
from typing import Callable, Sequence

import markdown
from markdown import Extension

from markdeck.renderer.session import RenderSession

logger = logging.getLogger(__name__)

# Transform treeprocessors are spread over (LOWEST, HIGHEST]: below the
# prettify step (10) and above the slide sectioning step (2).
HIGHEST_PRIORITY = 9.0
LOWEST_PRIORITY = 3.0


class ContentTransform:
    """
    A post-parse Markdown transform that can be switched off.

    Subclasses set ``name``, decide ``enabled`` from their options and
    build a python-markdown extension bound to one render session.
    """

    name = "transform"
    enabled = True

    def extension(self, session: RenderSession, priority: float) -> Extension:
        """
        Build the extension for one render.

        Args:
            session: Session the transform reports into
            priority: Treeprocessor priority assigned from list position

        Returns:
            Extension ready to register on a Markdown instance
        """
        raise NotImplementedError


class TransformRegistry:
    """Registers the base compiler hook followed by transforms in list order."""

    def __init__(
        self,
        base: Callable[[markdown.Markdown], None],
        transforms: Sequence[ContentTransform],
    ) -> None:
        self.base = base
        self.transforms = list(transforms)

    def priority_for(self, position: int) -> float:
        """Priority for the transform at ``position``; earlier runs first."""
        step = (HIGHEST_PRIORITY - LOWEST_PRIORITY) / max(len(self.transforms), 1)
        return HIGHEST_PRIORITY - position * step

    def register(self, md: markdown.Markdown, session: RenderSession) -> list[str]:
        """
        Register everything on ``md``.

        Priorities come from each transform's position in the full list, so
        a skipped transform never shifts the order of the others.

        Returns:
            Names of the transforms that were registered
        """
        self.base(md)

        registered = []
        for position, transform in enumerate(self.transforms):
            if not transform.enabled:
                logger.debug(f"Skipping disabled transform: {transform.name}")
                continue
            md.registerExtensions([transform.extension(session, self.priority_for(position))], {})
            registered.append(transform.name)
        return registered
