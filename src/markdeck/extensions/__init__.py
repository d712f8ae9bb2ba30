"""Content transforms registered on top of the base slide compiler."""

from .emoji import EmojiTransform, emoji_css
from .fitting import FITTING_CSS, FittingTransform
from .math import MathTransform
from .mathml import MathEngine, MathMLEngine, MathRenderError

__all__ = [
    "EmojiTransform",
    "FITTING_CSS",
    "FittingTransform",
    "MathEngine",
    "MathMLEngine",
    "MathRenderError",
    "MathTransform",
    "emoji_css",
]
