"""markdeck: Markdown to slide deck HTML and CSS."""

__version__ = "0.1.0"
__author__ = "markdeck contributors"
__license__ = "MIT"

from markdeck.config.models import (
    EmojiOptions,
    MathOptions,
    RenderOptions,
    ServerConfig,
)
from markdeck.renderer import DeckRenderer, RenderResult, RenderSession

__all__ = [
    "DeckRenderer",
    "EmojiOptions",
    "MathOptions",
    "RenderOptions",
    "RenderResult",
    "RenderSession",
    "ServerConfig",
    "__version__",
]
