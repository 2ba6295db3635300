"""Exception classes for scmark.

Every exception raised for bad input carries a Diagnostic with the file
identity and the start/end position of the offending token. ``str(err)``
is the full human-readable diagnostic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scmark.diagnostics import Diagnostic


class ScError(Exception):
    """Base exception for all scmark errors.

    Subclass this for specific error categories.
    """

    def __init__(self, diagnostic: Diagnostic) -> None:
        """Initialize error from a diagnostic.

        Args:
            diagnostic: Message, file identity and position of the failure
        """
        self.diagnostic = diagnostic
        super().__init__(diagnostic.format())

    @property
    def message(self) -> str:
        return self.diagnostic.message


class ReadError(ScError):
    """Lexical or syntactic error found by the reader.

    Raised when a consumer of the token stream hits an ERROR token, e.g. an
    unterminated block or a malformed argument list.
    """

    pass


class RenderError(ScError):
    """Structural error found while rendering HTML.

    Raised for unknown commands, missing blocks or required arguments, and
    sub-block commands used outside their container.
    """

    pass


class CapacityError(RenderError):
    """The tag stack would grow past its configured capacity."""

    pass


class InfoError(ScError):
    """A document's info command is missing or incomplete."""

    pass
