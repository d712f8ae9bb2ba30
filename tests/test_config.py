from __future__ import annotations

import dataclasses
import importlib
from pathlib import Path, PurePosixPath

import pytest

from markdeck import MathOptions, RenderOptions, ServerConfig
from markdeck.config import settings
from markdeck.config.models import ConfigError


def test_defaults() -> None:
    options = RenderOptions()
    assert options.html is False
    assert options.math == MathOptions()
    assert options.math.font_path is None
    assert options.emoji.shortcode and options.emoji.unicode
    assert options.inline_svg is True


def test_from_mapping_empty_is_default() -> None:
    assert RenderOptions.from_mapping(None) == RenderOptions()
    assert RenderOptions.from_mapping({}) == RenderOptions()


@pytest.mark.parametrize(
    "math, expected",
    [
        (True, MathOptions()),
        (False, None),
        ({"font_path": False}, MathOptions(font_path=False)),
        ({"font_path": "/fonts"}, MathOptions(font_path="/fonts")),
        ({"katex_options": {"macros": {"\\R": "\\mathbb{R}"}}}, MathOptions(katex_options={"macros": {"\\R": "\\mathbb{R}"}})),
    ],
)
def test_from_mapping_math(math, expected) -> None:
    assert RenderOptions.from_mapping({"math": math}).math == expected


def test_from_mapping_emoji_and_flags() -> None:
    options = RenderOptions.from_mapping(
        {"html": True, "inline_svg": False, "emoji": {"unicode": False}}
    )
    assert options.html is True
    assert options.inline_svg is False
    assert options.emoji.shortcode is True
    assert options.emoji.unicode is False


@pytest.mark.parametrize(
    "data",
    [
        {"colour": True},
        {"math": "yes"},
        {"math": {"font_path": True}},
        {"math": {"fonts": "/x"}},
        {"math": {"katex_options": ["a"]}},
        {"emoji": ["heart"]},
        {"emoji": {"shortcodes": True}},
    ],
)
def test_from_mapping_rejects_bad_input(data) -> None:
    with pytest.raises(ConfigError):
        RenderOptions.from_mapping(data)


def test_options_are_immutable() -> None:
    options = RenderOptions(math=MathOptions(katex_options={"throwOnError": False}))
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.html = True  # type: ignore[misc]
    with pytest.raises(TypeError):
        options.math.katex_options["throwOnError"] = True  # type: ignore[index]


def test_replace_returns_changed_copy() -> None:
    options = RenderOptions()
    changed = options.replace(math=None)
    assert changed.math is None
    assert options.math is not None


def test_font_path_accepts_paths() -> None:
    assert MathOptions(font_path=PurePosixPath("assets/fonts")).font_path == "assets/fonts"


def test_server_config_validation(tmp_path: Path) -> None:
    deck = tmp_path / "slides.md"
    deck.write_text("# Hi", encoding="utf-8")

    ServerConfig(deck_path=deck).validate()

    with pytest.raises(ValueError, match="Port"):
        ServerConfig(deck_path=deck, port=80).validate()
    with pytest.raises(ValueError, match="Invalid theme"):
        ServerConfig(deck_path=deck, theme="nope").validate()
    with pytest.raises(ValueError, match="does not exist"):
        ServerConfig(deck_path=tmp_path / "missing.md").validate()


def test_server_config_defaults_come_from_settings() -> None:
    config = ServerConfig()
    assert config.host == settings.DEFAULT_HOST
    assert config.port == settings.DEFAULT_PORT
    assert config.theme == settings.DEFAULT_THEME
    assert config.log_level == settings.DEFAULT_LOG_LEVEL


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MARKDECK_PORT", "9001")
    monkeypatch.setenv("MARKDECK_THEME", "gaia")
    try:
        reloaded = importlib.reload(settings)
        assert reloaded.DEFAULT_PORT == 9001
        assert reloaded.DEFAULT_THEME == "gaia"
    finally:
        monkeypatch.undo()
        importlib.reload(settings)
