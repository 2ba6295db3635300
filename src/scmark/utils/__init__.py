"""Utility modules for scmark.

Provides:
- text: escape_html, is_all_whitespace
- logger: get_logger for logging
"""

from scmark.utils.logger import get_logger
from scmark.utils.text import escape_html, is_all_whitespace

__all__ = [
    "escape_html",
    "get_logger",
    "is_all_whitespace",
]
