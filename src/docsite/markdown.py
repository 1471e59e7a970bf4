"""Markdown to HTML with Pygments-highlighted code fences."""

from __future__ import annotations

import logging
from collections.abc import Callable

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "txt"

Highlighter = Callable[[str, str], str]

_formatter = HtmlFormatter(nowrap=True)


def highlight_code(code: str, language: str) -> str:
    """Highlight ``code`` as ``language``, returning inner HTML (no ``<pre>``).

    Unknown languages are rendered as plain text.
    """
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        if language != DEFAULT_LANGUAGE:
            logger.debug("no lexer for %r, rendering as plain text", language)
        lexer = TextLexer()
    return highlight(code, lexer, _formatter)


def render(markdown: str, highlighter: Highlighter = highlight_code, *, header_ids: bool = False) -> str:
    """Render markdown to HTML.

    Args:
        markdown: Markdown source
        highlighter: Called as ``highlighter(code, language)`` for every fenced
            code block; fences without an info string get ``"txt"``
        header_ids: Add slug ``id`` attributes to headings

    Returns:
        HTML string
    """

    def _highlight(code: str, language: str, _attrs: str) -> str:
        return highlighter(code, language or DEFAULT_LANGUAGE)

    # commonmark plus tables, strikethrough and bare-URL links
    md = MarkdownIt("gfm-like", {"highlight": _highlight})
    if header_ids:
        md.use(anchors_plugin, max_level=6)
    return md.render(markdown)
