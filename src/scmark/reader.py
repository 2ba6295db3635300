"""Single-pass reader for SC documents.

The SC grammar is regular: plain text runs up to the next backslash, and a
backslash starts either an escaped backslash or a function call. Commands
cannot nest, so the reader produces a flat token stream and never builds a
tree. Lexing and parsing happen in the same pass.

Grammar:
    document  := (text | "\\\\" | function)*
    function  := "\\" name arglist? block?
    arglist   := "(" argument ("," argument)* ")"
    argument  := ws* name ws* "=" ws* (string | number) ws*
    string    := '"' [^"]* '"'          (no escape processing)
    number    := [0-9.-]+               (honor system, not validated)
    block     := "{" balanced-braces "}"

The reader is pull-based: each next_token() call consumes exactly one token.
Once it returns END or ERROR it is sticky, returning that same token forever
without consuming further input.

Thread Safety:
Reader instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator
from typing import NoReturn

from scmark.charsets import (
    BACKSLASH,
    CLOSE_BRACE,
    CLOSE_PAREN,
    COMMA,
    EQUALS,
    NAME_CHARS,
    NUMBER_CHARS,
    OPEN_BRACE,
    OPEN_PAREN,
    QUOTE,
    WHITESPACE,
)
from scmark.config import get_render_config
from scmark.location import SourcePosition
from scmark.tokens import Argument, Span, Token, TokenType
from scmark.utils.logger import get_logger

logger = get_logger(__name__)


class _ReadFailure(Exception):
    """Unwinds a partially read token back to next_token()."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Reader:
    """Pull-based reader producing one Token per call.

    Usage:
        >>> reader = Reader("Hello \\\\bold{World}")
        >>> for token in reader.tokenize():
        ...     print(token)
        Token(TEXT, 'Hello ', 1:1)
        Token(FUNCTION_CALL, '\\\\bold', 1:7)
        Token(END, '', 1:19)

    Thread Safety:
        Reader instances are single-use. Create one per source string.
        All state is instance-local; no shared mutable state.

    """

    __slots__ = (
        "_source",
        "_source_len",  # Cached len(source) to avoid repeated calls
        "_pos",
        "_line",
        "_col",
        "_path",
        "_file_name",
        "_max_arguments",
        "_terminal",  # END/ERROR token once reached; returned forever after
        # Start of the token being read
        "_start_pos",
        "_start_line",
        "_start_col",
    )

    def __init__(
        self,
        source: str,
        path: str = "",
        file_name: str = "",
        *,
        max_arguments: int | None = None,
    ) -> None:
        """Initialize reader with source text.

        Args:
            source: SC document text
            path: Path of the document (diagnostics only, never opened)
            file_name: File name of the document (diagnostics only)
            max_arguments: Argument cap per function call; defaults to the
                active RenderConfig
        """
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self._line = 1
        self._col = 1
        self._path = path
        self._file_name = file_name
        if max_arguments is None:
            max_arguments = get_render_config().max_arguments
        self._max_arguments = max_arguments
        self._terminal: Token | None = None

        self._start_pos = 0
        self._start_line = 1
        self._start_col = 1

    @property
    def position(self) -> SourcePosition:
        """Current line/column of the cursor."""
        return SourcePosition(self._line, self._col)

    @property
    def offset(self) -> int:
        """Current offset of the cursor in the source."""
        return self._pos

    @property
    def finished(self) -> bool:
        """True once END or ERROR has been produced."""
        return self._terminal is not None

    def next_token(self) -> Token:
        """Read the next token.

        Returns:
            The next Token. After END or ERROR, the same terminal token is
            returned on every call and no input is consumed.
        """
        if self._terminal is not None:
            return self._terminal

        self._start_pos = self._pos
        self._start_line = self._line
        self._start_col = self._col

        if self._pos >= self._source_len:
            self._terminal = self._make_token(TokenType.END)
            return self._terminal

        try:
            if self._source[self._pos] == BACKSLASH:
                return self._read_backslash()
            return self._read_text()
        except _ReadFailure as failure:
            self._terminal = self._make_token(TokenType.ERROR, message=failure.message)
            logger.debug(
                "Read error in %s at %d:%d: %s",
                self._file_name or "<string>",
                self._line,
                self._col,
                failure.message,
            )
            return self._terminal

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens up to and including the first END or ERROR.

        Yields:
            Token objects one at a time
        """
        while True:
            token = self.next_token()
            yield token
            if token.is_terminal:
                return

    # =========================================================================
    # Token readers
    # =========================================================================

    def _read_text(self) -> Token:
        """Read a run of plain text up to the next backslash."""
        self._consume_until(BACKSLASH)
        return self._make_token(TokenType.TEXT)

    def _read_backslash(self) -> Token:
        """Read an escaped backslash or a function call."""
        if self._pos + 1 >= self._source_len:
            self._fail("Backslash unescaped and with no function at the end of file")

        if self._source[self._pos + 1] == BACKSLASH:
            self._advance()
            self._advance()
            return self._make_token(TokenType.ESCAPED_BACKSLASH)

        return self._read_function()

    def _read_function(self) -> Token:
        """Read ``\\name``, then an optional argument list and block."""
        self._expect(
            BACKSLASH,
            "Parser internal problem. Tried to read function but there is no \\ at the start",
        )

        name = self._consume_while(NAME_CHARS)
        if not name:
            self._fail("Expected function name after backslash")

        arguments: tuple[Argument, ...] = ()
        if self._peek() == OPEN_PAREN:
            arguments = self._read_argument_list()

        block = None
        if self._peek() == OPEN_BRACE:
            block = self._read_block()

        return self._make_token(
            TokenType.FUNCTION_CALL,
            name=name,
            arguments=arguments,
            block=block,
        )

    def _read_argument_list(self) -> tuple[Argument, ...]:
        """Read ``(key=value, ...)``.

        An empty list ``()`` is an error: the first argument must have a name.
        """
        self._expect(
            OPEN_PAREN, "Parser internal problem. Tried to read param list but there is no ("
        )

        arguments: list[Argument] = []
        while self._pos < self._source_len:
            # _read_argument consumes trailing whitespace, so the cursor is
            # on a non-space character here
            arguments.append(self._read_argument(len(arguments)))
            if self._peek() == COMMA:
                self._advance()
            else:
                break

        self._expect(CLOSE_PAREN, "Parameter list is missing the closing paren")
        return tuple(arguments)

    def _read_argument(self, count: int) -> Argument:
        """Read one ``key = value`` pair.

        Args:
            count: Number of arguments already read for this call
        """
        if count >= self._max_arguments:
            self._fail("Function exceeds the max argument count")

        self._skip_whitespace()

        key = self._consume_while(NAME_CHARS)
        if not key:
            self._fail("Expected a parameter name")

        self._skip_whitespace()
        self._expect(EQUALS, "Expected = after param name")
        self._skip_whitespace()

        if self._pos >= self._source_len:
            self._fail("Reached EOF without finding parameter value")

        char = self._source[self._pos]
        if char == QUOTE:
            self._advance()
            start = self._pos
            self._consume_until(QUOTE)
            value = Span(self._source, start, self._pos)
            self._expect(QUOTE, "Reached EOF without finding closing quote")
        elif char in NUMBER_CHARS:
            value = self._consume_while(NUMBER_CHARS)
        else:
            self._fail("Expected parameter value but found something else")

        self._skip_whitespace()
        return Argument(key=key, value=value)

    def _read_block(self) -> Span:
        """Read a brace-balanced block.

        Inner braces only need to balance; they are kept verbatim. The
        closing brace is consumed but excluded from the returned span.
        """
        self._expect(
            OPEN_BRACE, "Parser internal problem. Tried to read block but there is no {"
        )

        source = self._source
        start = self._pos
        depth = 1
        while self._pos < self._source_len:
            char = source[self._pos]
            if char == OPEN_BRACE:
                depth += 1
            elif char == CLOSE_BRACE:
                depth -= 1
                if depth == 0:
                    break
            self._advance()

        if depth:
            self._fail("Closing brace of block is missing")

        block = Span(source, start, self._pos)
        self._advance()
        return block

    # =========================================================================
    # Character navigation helpers
    # =========================================================================

    def _peek(self) -> str:
        """Peek at current character without advancing.

        Returns:
            Current character or empty string at end of input.
        """
        if self._pos >= self._source_len:
            return ""
        return self._source[self._pos]

    def _advance(self) -> str:
        """Advance position by one character.

        Updates line/column tracking.

        Returns:
            The consumed character.
        """
        if self._pos >= self._source_len:
            return ""

        char = self._source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1

        return char

    def _consume_to(self, end: int) -> None:
        """Move the cursor to ``end``, updating line/column in bulk.

        Uses str.count on the skipped segment instead of a per-character loop.
        """
        segment = self._source[self._pos : end]
        newline_count = segment.count("\n")

        if newline_count > 0:
            last_nl = segment.rfind("\n")
            self._line += newline_count
            self._col = len(segment) - last_nl  # chars after last newline + 1
        else:
            self._col += len(segment)

        self._pos = end

    def _consume_until(self, char: str) -> None:
        """Consume up to (not including) the next ``char`` or end of input."""
        idx = self._source.find(char, self._pos)
        self._consume_to(idx if idx != -1 else self._source_len)

    def _consume_while(self, charset: frozenset[str]) -> Span:
        """Consume a maximal run of characters in ``charset``.

        Returns:
            Span of the consumed run (possibly empty).
        """
        source = self._source
        start = end = self._pos
        while end < self._source_len and source[end] in charset:
            end += 1
        self._consume_to(end)
        return Span(source, start, end)

    def _skip_whitespace(self) -> None:
        self._consume_while(WHITESPACE)

    def _expect(self, char: str, message: str) -> None:
        """Consume ``char`` or fail with ``message``."""
        if self._peek() != char:
            self._fail(message)
        self._advance()

    def _fail(self, message: str) -> NoReturn:
        raise _ReadFailure(message)

    # =========================================================================
    # Token construction
    # =========================================================================

    def _make_token(self, token_type: TokenType, **fields: object) -> Token:
        """Create a Token from the saved start to the current position.

        Args:
            token_type: The token type.
            **fields: Type-specific fields (name, arguments, block, message).

        Returns:
            Token covering everything consumed since the token began.
        """
        return Token(
            type=token_type,
            span=Span(self._source, self._start_pos, self._pos),
            start=SourcePosition(self._start_line, self._start_col),
            end=SourcePosition(self._line, self._col),
            path=self._path,
            file_name=self._file_name,
            **fields,  # type: ignore[arg-type]
        )


def tokenize(source: str, path: str = "", file_name: str = "") -> Iterator[Token]:
    """Tokenize ``source`` up to and including the first END or ERROR.

    Example:
        >>> [t.type.name for t in tokenize("a\\\\\\\\b")]
        ['TEXT', 'ESCAPED_BACKSLASH', 'TEXT', 'END']
    """
    return Reader(source, path, file_name).tokenize()
