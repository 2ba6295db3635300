"""Text helpers shared by the renderer and metadata extraction.

Example:
    >>> from scmark.utils.text import escape_html
    >>> escape_html('<a href="x">')
    '&lt;a href=&quot;x&quot;&gt;'
"""

from __future__ import annotations

import html

from scmark.charsets import WHITESPACE


def escape_html(text: str) -> str:
    """Escape the HTML special characters ``"``, ``&``, ``<`` and ``>``.

    Every other character, including ``'``, is passed through.

    Examples:
        >>> escape_html("a & b")
        'a &amp; b'
        >>> escape_html("it's")
        "it's"
    """
    return html.escape(text, quote=False).replace('"', "&quot;")


def is_all_whitespace(text: str) -> bool:
    """True if every character of ``text`` is ASCII whitespace.

    The empty string counts as whitespace.
    """
    return all(char in WHITESPACE for char in text)
