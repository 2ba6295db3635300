"""Human-readable diagnostics for reader and renderer failures.

A Diagnostic bundles an error message with the file identity and the
start/end positions of the token that caused it. The text layout matches
what site tooling prints when a page fails to build:

    Error while reading SC file: post.sc
    Path was: site/blog_main
    Error: Unknown command
    Starting location: line 4, col 1
    Ending location:   line 4, col 9

"""

from __future__ import annotations

from dataclasses import dataclass, replace

from scmark.location import SourcePosition
from scmark.tokens import Token


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """An error message with the location it refers to.

    Attributes:
        message: Error description
        file_name: File name of the document
        path: Path of the document
        start: Start position of the offending token
        end: End position of the offending token

    """

    message: str
    file_name: str
    path: str
    start: SourcePosition
    end: SourcePosition

    @classmethod
    def from_token(cls, token: Token, message: str | None = None) -> Diagnostic:
        """Build a diagnostic for ``token``.

        Args:
            token: Token the error refers to
            message: Override message; defaults to the token's own error message
        """
        return cls(
            message=message if message is not None else token.message,
            file_name=token.file_name,
            path=token.path,
            start=token.start,
            end=token.end,
        )

    def format(self) -> str:
        return (
            f"Error while reading SC file: {self.file_name}\n"
            f"Path was: {self.path}\n"
            f"Error: {self.message}\n"
            f"Starting location: line {self.start.line}, col {self.start.column}\n"
            f"Ending location:   line {self.end.line}, col {self.end.column}\n"
        )

    def __str__(self) -> str:
        return self.format()


def format_diagnostic(
    token: Token,
    file_name: str | None = None,
    path: str | None = None,
    message: str | None = None,
) -> str:
    """Format an error message for ``token``.

    Args:
        token: Token the error refers to
        file_name: File name override (defaults to the token's)
        path: Path override (defaults to the token's)
        message: Message override (defaults to the token's error message)

    Returns:
        Multi-line diagnostic text
    """
    diagnostic = Diagnostic.from_token(token, message)
    if file_name is not None:
        diagnostic = replace(diagnostic, file_name=file_name)
    if path is not None:
        diagnostic = replace(diagnostic, path=path)
    return diagnostic.format()
