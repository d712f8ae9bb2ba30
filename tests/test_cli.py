from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from markdeck.cli.main import app

from conftest import soup_of

runner = CliRunner()

DECK = "# First :smile:\n\n$E=mc^2$\n\n---\n\n# Second"


@pytest.fixture
def deck(tmp_path: Path) -> Path:
    path = tmp_path / "deck.md"
    path.write_text(DECK, encoding="utf-8")
    return path


def test_render_writes_standalone_document(deck: Path) -> None:
    result = runner.invoke(app, ["render", str(deck)])
    assert result.exit_code == 0, result.output

    document = deck.with_suffix(".html").read_text(encoding="utf-8")
    soup = soup_of(document)
    assert soup.title.get_text() == "deck"
    assert len(soup.find_all("section")) == 2
    assert "MutationObserver" in soup.find("script").get_text()
    assert "cdn.jsdelivr.net/npm/katex@" in soup.find("style", string=lambda s: "@font-face" in (s or "")).get_text()


def test_render_css_only_to_output(deck: Path, tmp_path: Path) -> None:
    target = tmp_path / "out" / "deck.css"
    result = runner.invoke(app, ["render", str(deck), "--css-only", "-o", str(target)])
    assert result.exit_code == 0, result.output

    css = target.read_text(encoding="utf-8")
    assert "img.twemoji" in css
    assert "KaTeX_Main" in css


def test_render_without_math(deck: Path) -> None:
    result = runner.invoke(app, ["render", str(deck), "--css-only", "--no-math"])
    assert result.exit_code == 0, result.output
    assert "KaTeX" not in deck.with_suffix(".css").read_text(encoding="utf-8")


def test_render_with_font_path(deck: Path) -> None:
    result = runner.invoke(app, ["render", str(deck), "--css-only", "--math-font-path", "/assets/fonts"])
    assert result.exit_code == 0, result.output
    css = deck.with_suffix(".css").read_text(encoding="utf-8")
    assert "url('/assets/fonts/KaTeX_Main-Regular.woff2')" in css
    assert "cdn.jsdelivr.net" not in css


def test_render_unknown_theme(deck: Path) -> None:
    result = runner.invoke(app, ["render", str(deck), "--theme", "missing"])
    assert result.exit_code == 2
    assert not deck.with_suffix(".html").exists()


def test_render_conflicting_font_flags(deck: Path) -> None:
    result = runner.invoke(
        app, ["render", str(deck), "--math-font-path", "/fonts", "--no-math-font-rewrite"]
    )
    assert result.exit_code == 2


def test_render_missing_source(tmp_path: Path) -> None:
    result = runner.invoke(app, ["render", str(tmp_path / "nope.md")])
    assert result.exit_code != 0


def test_themes_lists_builtin_themes() -> None:
    result = runner.invoke(app, ["themes"])
    assert result.exit_code == 0
    for name in ("default", "gaia", "uncover"):
        assert name in result.output
