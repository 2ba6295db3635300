"""Token and TokenType definitions for the SC reader.

The reader produces a stream of Token objects that the renderer consumes.
There is no tree: SC commands cannot nest, so a flat stream is enough.

Every piece of text a token refers to is a Span, a view into the original
source string. Spans hold a reference to the source and two offsets; the
substring is only materialized when ``.text`` is read.

Thread Safety:
Token and Span are frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from scmark.location import SourcePosition


class TokenType(Enum):
    """Token types produced by the reader."""

    TEXT = auto()  # Plain text up to the next backslash
    ESCAPED_BACKSLASH = auto()  # \\
    FUNCTION_CALL = auto()  # \name(args){block}
    END = auto()  # End of input (sticky)
    ERROR = auto()  # Read failure (sticky)


TERMINAL_TYPES = frozenset({TokenType.END, TokenType.ERROR})


@dataclass(frozen=True, slots=True)
class Span:
    """A ``[start, end)`` view into the source string.

    The source is shared, never copied. Use ``.text`` to get the substring.

    Examples:
        >>> span = Span("hello world", 6, 11)
        >>> span.text
        'world'

    """

    source: str
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.source[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def __bool__(self) -> bool:
        return self.end > self.start

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        val = self.text
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Span({val!r}, {self.start}:{self.end})"

    @classmethod
    def empty(cls, source: str, at: int) -> Span:
        """Create a zero-length span at ``at``."""
        return cls(source, at, at)


@dataclass(frozen=True, slots=True)
class Argument:
    """A ``key=value`` pair from a function call's argument list.

    String values exclude their quotes; numbers are kept as raw text.
    """

    key: Span
    value: Span


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the reader.

    Attributes:
        type: The token type
        span: Full source text covered by the token
        start: Position where the token begins
        end: Position where the token ends (error position for ERROR)
        path: Directory/path of the document, for diagnostics only
        file_name: File name of the document, for diagnostics only
        name: Function name (FUNCTION_CALL only)
        arguments: Ordered arguments (FUNCTION_CALL only)
        block: Brace block without its outer braces, or None
        message: Error description (ERROR only)

    """

    type: TokenType
    span: Span
    start: SourcePosition
    end: SourcePosition
    path: str = ""
    file_name: str = ""
    name: Span | None = None
    arguments: tuple[Argument, ...] = ()
    block: Span | None = None
    message: str = ""

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        if self.type is TokenType.FUNCTION_CALL and self.name is not None:
            val = "\\" + self.name.text
        elif self.type is TokenType.ERROR:
            val = self.message
        else:
            val = self.span.text
            if len(val) > 20:
                val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.start})"

    @property
    def text(self) -> str:
        return self.span.text

    @property
    def name_text(self) -> str:
        return self.name.text if self.name is not None else ""

    @property
    def has_block(self) -> bool:
        return self.block is not None

    @property
    def block_text(self) -> str:
        return self.block.text if self.block is not None else ""

    @property
    def is_terminal(self) -> bool:
        """True for END and ERROR, after which the reader yields nothing new."""
        return self.type in TERMINAL_TYPES

    def get_argument(self, key: str) -> str | None:
        """Return the value of the first argument named ``key``, if any."""
        for arg in self.arguments:
            if arg.key.text == key:
                return arg.value.text
        return None
