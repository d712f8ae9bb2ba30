"""Syntax highlighting for fenced code blocks."""

import logging
from html import escape
from typing import Any, Protocol

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)


class Highlighter(Protocol):
    """Anything that turns ``(code, language)`` into HTML-safe markup."""

    def __call__(self, code: str, language: str) -> str: ...


class PygmentsHighlighter:
    """
    Default highlighter backed by Pygments.

    A known language is highlighted with its lexer, an empty language is
    guessed from the code, and an unknown language or any lexer failure
    yields the escaped, unhighlighted code. The result is always safe to
    embed in HTML.
    """

    def __init__(self, **formatter_options: Any) -> None:
        self.formatter = HtmlFormatter(nowrap=True, **formatter_options)

    def __call__(self, code: str, language: str) -> str:
        try:
            return highlight(code, self._lexer_for(code, language), self.formatter)
        except ClassNotFound:
            return escape(code, quote=False)
        except Exception as e:  # lexers are arbitrary third-party code
            logger.debug(f"Highlighting failed for language {language!r}: {e}")
            return escape(code, quote=False)

    @staticmethod
    def _lexer_for(code: str, language: str) -> Lexer:
        if language:
            return get_lexer_by_name(language, stripnl=False)
        return guess_lexer(code, stripnl=False)
