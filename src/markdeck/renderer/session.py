"""Per-render state shared between content transforms and asset composition."""

from dataclasses import dataclass


@dataclass
class RenderSession:
    """Features that actually fired during one render call.

    A fresh session is created for every render and handed to each content
    transform when it is registered. The stylesheet step reads it once,
    after conversion has finished.
    """

    math_rendered: bool = False

    def mark_math_rendered(self) -> None:
        self.math_rendered = True
