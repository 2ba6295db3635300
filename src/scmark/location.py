"""Source position tracking for diagnostics.

Provides SourcePosition, the (line, column) pair the reader advances as it
consumes characters. Every token records where it starts and ends so error
messages can point at the offending command.

Thread Safety:
SourcePosition is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """A 1-indexed line/column position in an SC document.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Examples:
        >>> pos = SourcePosition(line=3, column=7)
        >>> str(pos)
        '3:7'

    """

    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"
