from __future__ import annotations

from markdeck import DeckRenderer, EmojiOptions, RenderOptions

from conftest import soup_of


def _render(markdown_text: str, **emoji: bool):
    options = RenderOptions(emoji=EmojiOptions(**emoji))
    return DeckRenderer(options).render(markdown_text)


def test_shortcode_and_unicode_render_identically() -> None:
    soup = soup_of(_render("# emoji:heart:\n\n## emoji❤️").html)
    h1, h2 = soup.find("h1"), soup.find("h2")
    assert h1.find("img", class_="twemoji") is not None
    assert h1.decode_contents() == h2.decode_contents()


def test_variation_selector_does_not_change_output() -> None:
    soup = soup_of(_render("# \u2764\n\n## \u2764\ufe0f").html)
    assert soup.find("h1").find("img") is not None
    assert soup.find("h1").decode_contents() == soup.find("h2").decode_contents()


def test_unknown_shortcodes_stay_text() -> None:
    soup = soup_of(_render("at 10:30:00 :not_an_emoji_name:").html)
    assert soup.find("img") is None
    assert "10:30:00 :not_an_emoji_name:" in soup.get_text()


def test_shortcodes_can_be_disabled() -> None:
    soup = soup_of(_render("a :heart: b ❤️", shortcode=False).html)
    assert ":heart:" in soup.get_text()
    assert len(soup.find_all("img", class_="twemoji")) == 1


def test_unicode_can_be_disabled() -> None:
    soup = soup_of(_render("a :heart: b ❤️", unicode=False).html)
    assert len(soup.find_all("img", class_="twemoji")) == 1
    assert "❤️" in soup.get_text()


def test_inline_code_is_left_alone() -> None:
    soup = soup_of(_render("`:heart:` and ❤️").html)
    assert soup.find("code").get_text() == ":heart:"
    assert len(soup.find_all("img")) == 1


def test_emoji_in_tails_and_nested_elements() -> None:
    soup = soup_of(_render("**bold :smile:** then :heart: and :heart:").html)
    assert soup.find("strong").find("img") is not None
    assert len(soup.find_all("img", class_="twemoji")) == 3


def test_emoji_css_follows_options() -> None:
    assert "img.twemoji" in _render("text").css
    css = _render("text :heart:", shortcode=False, unicode=False).css
    assert "img.twemoji" not in css
    assert "twemoji" not in _render(":heart:", shortcode=False, unicode=False).html


def test_trailing_variation_selector_is_consumed() -> None:
    soup = soup_of(_render("## emoji\u2764\ufe0f end").html)
    h2 = soup.find("h2")
    assert len(h2.find_all("img")) == 1
    assert "\ufe0f" not in h2.get_text()
    assert h2.get_text() == "emoji end"


def test_sequences_match_with_or_without_inner_selector() -> None:
    soup = soup_of(_render("# \U0001f3f3\ufe0f\u200d\U0001f308\n\n## \U0001f3f3\u200d\U0001f308").html)
    h1, h2 = soup.find("h1"), soup.find("h2")
    assert len(h1.find_all("img")) == 1
    assert h1.get_text() == ""
    assert h1.decode_contents() == h2.decode_contents()


def test_text_symbols_stay_text() -> None:
    soup = soup_of(_render("Acme\u2122 and \u00a92024 \u00ae").html)
    assert soup.find("img") is None
    assert "Acme\u2122 and \u00a92024 \u00ae" in soup.get_text()


def test_text_symbols_with_selector_become_emoji() -> None:
    soup = soup_of(_render("Acme\u2122\ufe0f").html)
    assert soup.find("img", class_="twemoji") is not None
    assert "\ufe0f" not in soup.get_text()


def test_ascii_text_is_untouched() -> None:
    soup = soup_of(_render("1 2 3 # * plain ascii").html)
    assert soup.find("img") is None
