"""Structural tag kinds and the bounded tag stack.

The renderer never builds a tree. Instead it keeps a stack of the HTML
elements currently open and writes each opening or closing tag the moment
the stack changes, so the order of writes always matches the nesting.

TagKind spellings are data-driven: the open spelling may carry attributes
(``ul class="horizlist"``), the close spelling is the bare element name.

Thread Safety:
TagStack instances are local to each render call.
No shared mutable state.

"""

from __future__ import annotations

from enum import Enum, auto

from scmark.stringbuilder import StringBuilder


class TagKind(Enum):
    """Structural elements the renderer opens and closes."""

    ROOT = auto()  # Permanent bottom-of-stack sentinel, never written
    ARTICLE = auto()
    SECTION = auto()
    PARAGRAPH = auto()
    ORDERED_LIST = auto()
    UNORDERED_LIST = auto()
    HORIZONTAL_LIST = auto()
    TABLE_WRAPPER = auto()  # Lets wide tables scroll horizontally
    TABLE = auto()
    LIST_ITEM = auto()
    TABLE_ROW = auto()
    TABLE_COLUMN = auto()
    TABLE_HEADING_COLUMN = auto()

    @property
    def open_tag(self) -> str:
        return TAG_SPELLINGS[self][0]

    @property
    def close_tag(self) -> str:
        return TAG_SPELLINGS[self][1]


# (open spelling, close spelling)
TAG_SPELLINGS: dict[TagKind, tuple[str, str]] = {
    TagKind.ROOT: ("", ""),
    TagKind.ARTICLE: ("article", "article"),
    TagKind.SECTION: ("section", "section"),
    TagKind.PARAGRAPH: ("p", "p"),
    TagKind.ORDERED_LIST: ("ol", "ol"),
    TagKind.UNORDERED_LIST: ("ul", "ul"),
    TagKind.HORIZONTAL_LIST: ('ul class="horizlist"', "ul"),
    TagKind.TABLE_WRAPPER: ('div class="tablediv"', "div"),
    TagKind.TABLE: ("table", "table"),
    TagKind.LIST_ITEM: ("li", "li"),
    TagKind.TABLE_ROW: ("tr", "tr"),
    TagKind.TABLE_COLUMN: ("td", "td"),
    TagKind.TABLE_HEADING_COLUMN: ("th", "th"),
}

# Kinds counted by section_depth
SECTION_KINDS = frozenset({TagKind.ARTICLE, TagKind.SECTION})

LIST_KINDS = frozenset(
    {
        TagKind.ORDERED_LIST,
        TagKind.UNORDERED_LIST,
        TagKind.HORIZONTAL_LIST,
    }
)

CELL_KINDS = frozenset({TagKind.TABLE_COLUMN, TagKind.TABLE_HEADING_COLUMN})


class TagStackOverflow(Exception):
    """Raised when a push would exceed the stack's capacity."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Tag nesting exceeds the max depth of {capacity}")


class TagStack:
    """Bounded stack of open structural tags.

    The ROOT sentinel is always at the bottom, so ``top`` is always defined.
    ``section_depth`` counts the ARTICLE and SECTION entries on the stack;
    heading levels are derived from it.

    Usage:
        >>> sb = StringBuilder()
        >>> tags = TagStack(sb)
        >>> tags.push(TagKind.ARTICLE)
        >>> tags.push(TagKind.PARAGRAPH)
        >>> tags.close_all()
        >>> sb.build()
        '<article>\\n<p>\\n</p>\\n</article>\\n'

    """

    __slots__ = ("_stack", "_capacity", "_sink", "section_depth")

    def __init__(self, sink: StringBuilder, capacity: int = 128) -> None:
        """Initialize a stack holding only the ROOT sentinel.

        Args:
            sink: Output the opening/closing tags are written to
            capacity: Maximum number of entries, ROOT included
        """
        self._stack: list[TagKind] = [TagKind.ROOT]
        self._capacity = capacity
        self._sink = sink
        self.section_depth = 0

    @property
    def top(self) -> TagKind:
        return self._stack[-1]

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        """Number of open tags, not counting ROOT."""
        return len(self._stack) - 1

    def kinds(self) -> tuple[TagKind, ...]:
        """Open tags from outermost to innermost, ROOT excluded."""
        return tuple(self._stack[1:])

    def push(self, kind: TagKind) -> None:
        """Open ``kind``: write its opening tag and push it.

        Raises:
            TagStackOverflow: If the stack is already at capacity
            ValueError: If kind is ROOT
        """
        if kind is TagKind.ROOT:
            raise ValueError("ROOT is a sentinel and cannot be pushed")
        if len(self._stack) >= self._capacity:
            raise TagStackOverflow(self._capacity)

        self._sink.append_format("<{}>\n", kind.open_tag)
        self._stack.append(kind)
        if kind in SECTION_KINDS:
            self.section_depth += 1

    def pop(self) -> TagKind:
        """Close the innermost tag: pop it and write its closing tag.

        Raises:
            IndexError: If only the ROOT sentinel is left
        """
        if len(self._stack) == 1:
            raise IndexError("Cannot pop the ROOT sentinel")

        kind = self._stack.pop()
        self._sink.append_format("</{}>\n", kind.close_tag)
        if kind in SECTION_KINDS:
            self.section_depth -= 1
        return kind

    def rise_to_lowest_section(self) -> None:
        """Close tags until the innermost SECTION or ARTICLE is on top.

        Stops at the ROOT sentinel if no section is open.
        """
        while self.top not in SECTION_KINDS and self.top is not TagKind.ROOT:
            self.pop()

    def rise_to_section_level(self, level: int) -> None:
        """Leave the stack with exactly ``level`` ARTICLE/SECTION entries.

        Closes everything deeper than ``level - 1`` first, then opens as many
        sections as needed. A subsection (level 3) directly under the article
        therefore opens an intermediate section too. Containers at the same
        or a shallower depth stay open, so the new section nests inside them.
        """
        while self.section_depth > level - 1:
            self.pop()
        while self.section_depth < level:
            self.push(TagKind.SECTION)

    def close_all(self) -> None:
        """Close every open tag down to the ROOT sentinel."""
        while self.top is not TagKind.ROOT:
            self.pop()
