"""Streaming HTML renderer driven by a tag-stack automaton.

Consumes the reader's token stream and writes HTML straight into a
StringBuilder. Each token produces zero or more output chunks plus a change
to the tag stack; there is no intermediate tree and no lookahead.

Command catalog:
- Inline (no stack effect): bold, italic, inline, link
- Heading (close deeper sections, then open sections up to the level):
  section, subsection
- Block (rise to the enclosing section/article, then open structure):
  paragraph, ordered_list, unordered_list,
  horizontal_list, table, html, code, quote, image, info
- Sub-block (operate inside the current container only): item, hitem, row

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can safely share a single HtmlRenderer instance
and call render() concurrently without synchronization.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scmark.config import get_render_config
from scmark.diagnostics import Diagnostic
from scmark.errors import CapacityError, ReadError, RenderError
from scmark.reader import Reader
from scmark.stringbuilder import StringBuilder
from scmark.tags import CELL_KINDS, LIST_KINDS, SECTION_KINDS, TagKind, TagStack, TagStackOverflow
from scmark.tokens import Token, TokenType
from scmark.utils.logger import get_logger
from scmark.utils.text import escape_html, is_all_whitespace

logger = get_logger(__name__)

# Heading level passed to rise_to_section_level (the article is level 1)
SECTION_LEVELS: dict[str, int] = {
    "section": 2,
    "subsection": 3,
}

CONTAINER_COMMANDS: dict[str, TagKind] = {
    "paragraph": TagKind.PARAGRAPH,
    "ordered_list": TagKind.ORDERED_LIST,
    "unordered_list": TagKind.UNORDERED_LIST,
    "horizontal_list": TagKind.HORIZONTAL_LIST,
}

INLINE_WRAPPERS: dict[str, str] = {
    "bold": "b",
    "italic": "i",
    "inline": "code",
}


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render, ensuring thread safety when sharing
    HtmlRenderer instances across threads.
    """

    sink: StringBuilder
    tags: TagStack
    finished: bool = False


class HtmlRenderer:
    """Render an SC document to an HTML fragment.

    Usage:
        >>> renderer = HtmlRenderer(file_name="hello.sc")
        >>> renderer.render("A \\\\bold{B} C")
        '<article>\\n<p>\\nA <b>\\nB</b>\\n C</p>\\n</article>\\n'

    Errors:
        Reader failures raise ReadError; structural failures raise
        RenderError. Either way no closing tags are written, and the
        partial output is left in the sink for the caller to discard.

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
        Each render() call creates an independent RenderContext.
    """

    __slots__ = ("_path", "_file_name")

    def __init__(self, path: str = "", file_name: str = "") -> None:
        """Initialize renderer.

        Args:
            path: Path of the document, used only in diagnostics
            file_name: File name of the document, used only in diagnostics
        """
        self._path = path
        self._file_name = file_name

    def render(self, source: str) -> str:
        """Render SC source to an HTML string.

        Raises:
            ReadError: The source is not well-formed SC
            RenderError: A command is unknown or used out of place
        """
        sb = StringBuilder()
        self.render_into(source, sb)
        return sb.build()

    def render_into(self, source: str, sink: StringBuilder) -> None:
        """Render SC source, appending the HTML to ``sink``."""
        reader = Reader(source, self._path, self._file_name)
        self.render_tokens(reader.tokenize(), sink)
        logger.debug("Rendered %s (%d chars)", self._file_name or "<string>", len(source))

    def render_tokens(self, tokens: Iterable[Token], sink: StringBuilder) -> None:
        """Drain ``tokens`` into ``sink``.

        Rendering stops at the first END or ERROR token. A stream that runs
        out without an END is closed as if it had one.
        """
        ctx = self.begin(sink)
        for token in tokens:
            self.feed(token, ctx)
            if ctx.finished:
                return
        self.finish(ctx)

    # =========================================================================
    # Transducer interface
    # =========================================================================

    def begin(self, sink: StringBuilder) -> RenderContext:
        """Start a document: open the article."""
        tags = TagStack(sink, capacity=get_render_config().max_tag_depth)
        tags.push(TagKind.ARTICLE)
        return RenderContext(sink=sink, tags=tags)

    def feed(self, token: Token, ctx: RenderContext) -> None:
        """Apply one token: write its output and update the tag stack.

        Raises:
            ReadError: If token is an ERROR token
            RenderError: If the token cannot be rendered in the current state
        """
        if ctx.finished:
            raise RuntimeError("feed() called after the document was finished")

        try:
            match token.type:
                case TokenType.TEXT:
                    self._render_text(token, ctx)
                case TokenType.ESCAPED_BACKSLASH:
                    self._open_implicit_paragraph(ctx)
                    ctx.sink.append("\\")
                case TokenType.FUNCTION_CALL:
                    self._render_command(token, ctx)
                case TokenType.END:
                    self.finish(ctx)
                case TokenType.ERROR:
                    raise ReadError(Diagnostic.from_token(token))
        except TagStackOverflow as exc:
            raise CapacityError(Diagnostic.from_token(token, str(exc))) from exc

    def finish(self, ctx: RenderContext) -> None:
        """Close every open tag."""
        ctx.tags.close_all()
        ctx.finished = True

    # =========================================================================
    # Text
    # =========================================================================

    def _open_implicit_paragraph(self, ctx: RenderContext) -> bool:
        """Open a paragraph if content lands directly in a section/article."""
        if ctx.tags.top in SECTION_KINDS:
            ctx.tags.push(TagKind.PARAGRAPH)
            return True
        return False

    def _render_text(self, token: Token, ctx: RenderContext) -> None:
        text = token.text
        if not is_all_whitespace(text) and self._open_implicit_paragraph(ctx):
            # The opening tag already ends the line
            if text.startswith("\n"):
                text = text[1:]
        ctx.sink.append(escape_html(text))

    # =========================================================================
    # Commands
    # =========================================================================

    def _render_command(self, token: Token, ctx: RenderContext) -> None:
        """Dispatch a function call by name."""
        name = token.name_text
        tags = ctx.tags
        sb = ctx.sink

        match name:
            case "section" | "subsection":
                self._require_block(token, name)
                tags.rise_to_section_level(SECTION_LEVELS[name])
                self._write_in_tag(sb, token.block_text, "h1")
            case "paragraph" | "ordered_list" | "unordered_list" | "horizontal_list":
                tags.rise_to_lowest_section()
                tags.push(CONTAINER_COMMANDS[name])
            case "table":
                tags.rise_to_lowest_section()
                tags.push(TagKind.TABLE_WRAPPER)
                tags.push(TagKind.TABLE)
                if token.has_block:
                    self._write_in_tag(sb, token.block_text, "caption")
            case "item":
                self._render_item(token, tags)
            case "hitem":
                self._render_heading_item(token, tags)
            case "row":
                self._render_row(token, tags)
            case "html":
                self._require_block(token, name)
                tags.rise_to_lowest_section()
                sb.append(token.block_text)
            case "code":
                self._require_block(token, name)
                tags.rise_to_lowest_section()
                self._render_code(token.block_text, sb)
            case "quote":
                self._require_block(token, name)
                tags.rise_to_lowest_section()
                self._write_in_tag(sb, token.block_text, "blockquote")
            case "bold" | "italic" | "inline":
                self._require_block(token, name)
                self._write_in_tag(sb, token.block_text, INLINE_WRAPPERS[name])
            case "link":
                self._render_link(token, sb)
            case "image":
                tags.rise_to_lowest_section()
                self._render_image(token, sb)
            case "info":
                self._render_info(token, ctx)
            case _:
                raise self._error(token, "Unknown command")

    def _render_item(self, token: Token, tags: TagStack) -> None:
        """``\\item``: a list item, or a data cell inside a table row."""
        if tags.top is TagKind.LIST_ITEM or tags.top in CELL_KINDS:
            tags.pop()

        if tags.top in LIST_KINDS:
            tags.push(TagKind.LIST_ITEM)
        elif tags.top is TagKind.TABLE_ROW:
            tags.push(TagKind.TABLE_COLUMN)
        else:
            raise self._error(token, "You can only open an \\item in a table row or list")

    def _render_heading_item(self, token: Token, tags: TagStack) -> None:
        """``\\hitem``: a heading cell inside a table row."""
        if tags.top in CELL_KINDS:
            tags.pop()

        if tags.top is not TagKind.TABLE_ROW:
            raise self._error(token, "You can only open an \\hitem in a table row")
        tags.push(TagKind.TABLE_HEADING_COLUMN)

    def _render_row(self, token: Token, tags: TagStack) -> None:
        """``\\row``: close the current cell and row, then open a new row."""
        if tags.top in CELL_KINDS:
            tags.pop()
        if tags.top is TagKind.TABLE_ROW:
            tags.pop()

        if tags.top is not TagKind.TABLE:
            raise self._error(token, "You can only open a \\row in a table")
        tags.push(TagKind.TABLE_ROW)

    def _render_code(self, code: str, sb: StringBuilder) -> None:
        """Render a preformatted code block."""
        # \code{
        # body
        # } should not start with a blank line inside <pre>
        if code.startswith("\n"):
            code = code[1:]
        sb.append("<pre><code>")
        sb.append(escape_html(code))
        sb.append("</code></pre>\n")

    def _render_link(self, token: Token, sb: StringBuilder) -> None:
        self._require_block(token, "link")
        sb.append("<a")
        if not self._write_attributes(token, sb, url_attribute="href"):
            raise self._error(token, "Missing required url parameter in link")
        sb.append(">")
        sb.append(escape_html(token.block_text))
        sb.append("</a>")

    def _render_image(self, token: Token, sb: StringBuilder) -> None:
        sb.append("<img")
        if not self._write_attributes(token, sb, url_attribute="src"):
            raise self._error(token, "Missing required url parameter in image")
        sb.append(">\n")

    def _render_info(self, token: Token, ctx: RenderContext) -> None:
        """``\\info``: page metadata; only the title is rendered."""
        ctx.tags.rise_to_lowest_section()
        if ctx.tags.top is not TagKind.ARTICLE:
            raise self._error(token, "Info command should be at the beginning of the file")

        for arg in token.arguments:
            if arg.key.text == "title":
                self._write_in_tag(ctx.sink, arg.value.text, "h1")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _write_in_tag(self, sb: StringBuilder, text: str, tag: str) -> None:
        """Write escaped ``text`` wrapped in ``tag``."""
        sb.append_format("<{}>\n", tag)
        sb.append(escape_html(text))
        sb.append_format("</{}>\n", tag)

    def _write_attributes(self, token: Token, sb: StringBuilder, *, url_attribute: str) -> bool:
        """Write every argument as an attribute, renaming ``url``.

        Values are written raw; a string value can never contain a quote.

        Returns:
            True if a ``url`` argument was present
        """
        found_url = False
        for arg in token.arguments:
            key = arg.key.text
            if key == "url":
                found_url = True
                key = url_attribute
            sb.append(f' {key}="{arg.value.text}"')
        return found_url

    def _require_block(self, token: Token, name: str) -> None:
        if not token.has_block:
            raise self._error(token, f"{name} commands require a block")

    def _error(self, token: Token, message: str) -> RenderError:
        return RenderError(Diagnostic.from_token(token, message))
