"""StringBuilder for O(n) string accumulation.

The output sink every render writes into. Appends to a list, joins once at
the end: O(n) total vs O(n²) for repeated string concatenation.

The write position can be snapshotted with save() and rolled back with
restore(), so a caller can discard the partial output of a failed render
without reallocating the builder.

Thread Safety:
StringBuilder instances are local to each render() call.
No shared mutable state.

"""

from __future__ import annotations

from typing import Any


class StringBuilder:
    """Efficient append-only string accumulator.

    Usage:
        >>> sb = StringBuilder()
        >>> sb.append("<b>")
        >>> mark = sb.save()
        >>> sb.append("oops")
        >>> sb.restore(mark)
        >>> sb.append("Hello").append("</b>")
        >>> sb.build()
        '<b>Hello</b>'

    Thread Safety:
        Instance is local to each render() call.
        No shared mutable state.

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        """Initialize empty StringBuilder."""
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a string to the builder.

        Args:
            s: String to append (empty strings are skipped)

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def append_line(self, s: str = "") -> StringBuilder:
        """Append a string followed by newline.

        Args:
            s: String to append (empty = just newline)

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        self._parts.append("\n")
        return self

    def append_format(self, template: str, *args: Any, **kwargs: Any) -> StringBuilder:
        """Append ``template.format(*args, **kwargs)``.

        Returns:
            self for method chaining
        """
        return self.append(template.format(*args, **kwargs))

    def extend(self, strings: list[str]) -> StringBuilder:
        """Append multiple strings at once.

        Args:
            strings: List of strings to append

        Returns:
            self for method chaining
        """
        self._parts.extend(s for s in strings if s)
        return self

    def save(self) -> int:
        """Snapshot the current write position.

        Returns:
            Opaque position to pass to restore()
        """
        return len(self._parts)

    def restore(self, position: int) -> StringBuilder:
        """Discard everything appended after ``position``.

        Args:
            position: Value previously returned by save()

        Returns:
            self for method chaining

        Raises:
            ValueError: If position is ahead of the current write position
        """
        if position < 0 or position > len(self._parts):
            raise ValueError(
                f"Cannot restore to position {position}; builder holds {len(self._parts)} parts"
            )
        del self._parts[position:]
        return self

    def build(self) -> str:
        """Join all parts into final string.

        Returns:
            Concatenated string of all appended parts
        """
        return "".join(self._parts)

    def clear(self) -> StringBuilder:
        """Clear all accumulated parts.

        Returns:
            self for method chaining
        """
        self._parts.clear()
        return self

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        """Return True if any parts have been appended."""
        return bool(self._parts)
