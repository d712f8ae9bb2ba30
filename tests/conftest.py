from __future__ import annotations

from typing import Any, Mapping

import pytest
from bs4 import BeautifulSoup

from markdeck import browser
from markdeck.extensions.mathml import MathRenderError

MOCK_MATH_CSS = (
    "@font-face{font-family:KaTeX_Mock;"
    "src:url(fonts/KaTeX_Mock.woff2) format(\"woff2\"),"
    "url('fonts/KaTeX_Mock.woff') format(\"woff\"),"
    "url(\"fonts/KaTeX_Mock.ttf\") format(\"truetype\")}\n"
    ".katex-mock{background:url(images/grid.png)}"
)


class StubMathEngine:
    """Engine with predictable output that fails on chosen sources."""

    font_version = "9.9.9"

    def __init__(self, failing: tuple[str, ...] = ()) -> None:
        self.failing = set(failing)
        self.calls: list[tuple[str, bool]] = []

    def render(self, source: str, *, display: bool, options: Mapping[str, Any]) -> str:
        self.calls.append((source, display))
        if source in self.failing:
            raise MathRenderError(source, "unbalanced brace")
        return f'<math class="stub">{source}</math>'

    def css(self) -> str:
        return MOCK_MATH_CSS


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


@pytest.fixture(autouse=True)
def no_browser_host():
    browser.uninstall_host()
    yield
    browser.uninstall_host()


@pytest.fixture
def fresh_observer_hook(monkeypatch: pytest.MonkeyPatch) -> browser.EnvironmentHook:
    hook = browser.EnvironmentHook(browser.register_observers)
    monkeypatch.setattr(browser, "_observer_hook", hook)
    return hook
