"""
scmark: SC markup to HTML

SC is a small LaTeX-inspired markup language: plain text is literal, and a
backslash introduces a command with optional keyword arguments and an
optional brace-delimited block. Commands cannot nest, so documents are read
as a flat token stream and rendered in one pass, with no tree in between.

Quick Start:
    >>> from scmark import render
    >>> print(render("\\\\section{Hello}\\nWorld"), end="")
    <article>
    <section>
    <h1>
    Hello</h1>
    <p>
    World</p>
    </section>
    </article>

    >>> # Or use the high-level Converter class
    >>> from scmark import Converter
    >>> convert = Converter(max_tag_depth=32)
    >>> html = convert("Some \\\\bold{bold} text")

Errors:
    Every failure raises an ScError subclass whose message is a full
    diagnostic: file name, path, description and start/end positions.

        >>> render("\\\\item one")
        Traceback (most recent call last):
        ...
        scmark.errors.RenderError: Error while reading SC file: ...

"""

from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context

from scmark.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from scmark.diagnostics import Diagnostic, format_diagnostic
from scmark.errors import CapacityError, InfoError, ReadError, RenderError, ScError
from scmark.info import DocumentInfo, extract_info
from scmark.location import SourcePosition
from scmark.reader import Reader
from scmark.renderer import HtmlRenderer
from scmark.stringbuilder import StringBuilder
from scmark.tags import TagKind, TagStack
from scmark.tokens import Argument, Span, Token, TokenType

__version__ = "0.1.0"


def tokenize(source: str, *, path: str = "", file_name: str = "") -> Iterator[Token]:
    """Tokenize SC source.

    Yields tokens up to and including the first END or ERROR token; reader
    errors are reported as ERROR tokens, never raised.

    Example:
        >>> [t.type.name for t in tokenize("Hi \\\\bold{there}")]
        ['TEXT', 'FUNCTION_CALL', 'END']
    """
    return Reader(source, path, file_name).tokenize()


def render(source: str, *, path: str = "", file_name: str = "") -> str:
    """Render SC source to an HTML fragment.

    Args:
        source: SC document text
        path: Path of the document, used only in diagnostics
        file_name: File name of the document, used only in diagnostics

    Returns:
        HTML string wrapped in a single <article> element

    Raises:
        ReadError: The source is not well-formed SC
        RenderError: A command is unknown or used out of place
    """
    return HtmlRenderer(path=path, file_name=file_name).render(source)


class Converter:
    """High-level SC processor with fixed capacities.

    Usage:
        >>> convert = Converter()
        >>> html = convert("\\\\paragraph Hello")

        >>> # Batch rendering on a thread pool
        >>> pages = convert.render_many(["A", "B", "C"], max_workers=4)

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Converter instances concurrently from different threads.

    """

    __slots__ = ("_config",)

    def __init__(
        self,
        *,
        max_arguments: int | None = None,
        max_tag_depth: int | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        """Initialize converter.

        Args:
            max_arguments: Argument cap per command (default 32)
            max_tag_depth: Tag stack capacity (default 128)
            config: Base config; explicit keyword arguments override it
        """
        base = config or RenderConfig()
        self._config = RenderConfig(
            max_arguments=base.max_arguments if max_arguments is None else max_arguments,
            max_tag_depth=base.max_tag_depth if max_tag_depth is None else max_tag_depth,
        )

    @property
    def config(self) -> RenderConfig:
        return self._config

    def __call__(self, source: str) -> str:
        """Render SC source to HTML in one call."""
        return self.render(source)

    def render(self, source: str, *, path: str = "", file_name: str = "") -> str:
        """Render SC source to HTML with this converter's capacities.

        Raises:
            ReadError: The source is not well-formed SC
            RenderError: A command is unknown or used out of place
        """
        with render_config_context(self._config):
            return HtmlRenderer(path=path, file_name=file_name).render(source)

    def tokenize(self, source: str, *, path: str = "", file_name: str = "") -> list[Token]:
        """Tokenize SC source with this converter's argument cap."""
        reader = Reader(source, path, file_name, max_arguments=self._config.max_arguments)
        return list(reader.tokenize())

    def render_many(
        self,
        sources: Iterable[str],
        *,
        max_workers: int | None = None,
    ) -> list[str]:
        """Render independent documents in parallel.

        Each document gets its own reader, tag stack and output sink; no
        state is shared between workers. Results keep the input order.

        Raises:
            ScError: The first failing document's error, in input order
        """
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            # Each task runs in a fresh copy of the caller's context
            futures = [pool.submit(copy_context().run, self.render, source) for source in sources]
            return [future.result() for future in futures]


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "render",
    "tokenize",
    "extract_info",
    "Converter",
    # Reader and tokens
    "Reader",
    "Token",
    "TokenType",
    "Span",
    "Argument",
    "SourcePosition",
    # Renderer
    "HtmlRenderer",
    "StringBuilder",
    "TagKind",
    "TagStack",
    # Diagnostics and errors
    "Diagnostic",
    "format_diagnostic",
    "ScError",
    "ReadError",
    "RenderError",
    "CapacityError",
    "InfoError",
    # Metadata
    "DocumentInfo",
    # Configuration (ContextVar-based)
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
]
