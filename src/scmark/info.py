"""Document metadata from the ``\\info`` command.

Every page of an SC site starts with an info command naming its title and
date, e.g. ``\\info(title="Release notes", date="2019-04-02")``. Site tooling
reads it to title pages and to sort blog entries by date, without rendering
the document.

Example:
    >>> info = extract_info('\\\\info(title="Hello", date="2020-01-01")')
    >>> info.title, info.date
    ('Hello', '2020-01-01')
"""

from __future__ import annotations

from dataclasses import dataclass

from scmark.diagnostics import Diagnostic
from scmark.errors import InfoError, ReadError
from scmark.reader import Reader
from scmark.tokens import Token, TokenType


@dataclass(frozen=True, slots=True)
class DocumentInfo:
    """Title and date of a document.

    The date is kept as written; ISO dates sort chronologically as text.
    """

    title: str
    date: str


def extract_info(source: str, path: str = "", file_name: str = "") -> DocumentInfo:
    """Read the first ``\\info`` command of ``source``.

    Args:
        source: SC document text
        path: Path of the document, used only in diagnostics
        file_name: File name of the document, used only in diagnostics

    Returns:
        DocumentInfo with the title and date arguments

    Raises:
        ReadError: The source is not well-formed SC
        InfoError: There is no info command, or it lacks a title or date
    """
    reader = Reader(source, path, file_name)
    while True:
        token = reader.next_token()
        match token.type:
            case TokenType.END:
                raise InfoError(Diagnostic.from_token(token, "Info command not found"))
            case TokenType.ERROR:
                raise ReadError(Diagnostic.from_token(token))
            case TokenType.FUNCTION_CALL if token.name_text == "info":
                return _info_from_token(token)


def _info_from_token(token: Token) -> DocumentInfo:
    title = token.get_argument("title")
    date = token.get_argument("date")
    if title is None or date is None:
        raise InfoError(Diagnostic.from_token(token, "Info command is missing required params"))
    return DocumentInfo(title=title, date=date)
