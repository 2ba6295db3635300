"""Tests for accurate source position tracking in the reader.

Token positions are what diagnostics report, so line and column must be
exact for single-line tokens, multi-line text, multi-line blocks, and error
tokens.
"""

from scmark.location import SourcePosition
from scmark.reader import Reader
from scmark.tokens import TokenType


class TestSingleLinePositions:
    """Test position tracking for tokens on one line."""

    def test_text_then_function(self) -> None:
        """Text and function tokens should start where they begin."""
        tokens = list(Reader("Hello \\bold{World}").tokenize())

        assert [t.type for t in tokens] == [
            TokenType.TEXT,
            TokenType.FUNCTION_CALL,
            TokenType.END,
        ]
        assert tokens[0].start == SourcePosition(1, 1)
        assert tokens[0].end == SourcePosition(1, 7)
        assert tokens[1].start == SourcePosition(1, 7)
        assert tokens[1].end == SourcePosition(1, 19)

    def test_end_position_at_source_end(self) -> None:
        """END should sit one column past the last character."""
        tokens = list(Reader("abc").tokenize())

        end = tokens[-1]
        assert end.type == TokenType.END
        assert end.start == SourcePosition(1, 4)
        assert end.end == SourcePosition(1, 4)

    def test_empty_source(self) -> None:
        """Empty input yields END at 1:1."""
        tokens = list(Reader("").tokenize())

        assert len(tokens) == 1
        assert tokens[0].type == TokenType.END
        assert tokens[0].start == SourcePosition(1, 1)

    def test_escaped_backslash_width(self) -> None:
        """An escaped backslash consumes two columns."""
        tokens = list(Reader("a\\\\b").tokenize())

        backslash = tokens[1]
        assert backslash.type == TokenType.ESCAPED_BACKSLASH
        assert backslash.start == SourcePosition(1, 2)
        assert backslash.end == SourcePosition(1, 4)
        assert tokens[2].start == SourcePosition(1, 4)


class TestMultilinePositions:
    """Test position tracking across newlines."""

    def test_text_spanning_lines(self) -> None:
        """Column resets to 1 after each newline."""
        tokens = list(Reader("line1\nline2 \\bold{x}").tokenize())

        text = tokens[0]
        assert text.text == "line1\nline2 "
        assert text.start == SourcePosition(1, 1)
        assert text.end == SourcePosition(2, 7)
        assert tokens[1].start == SourcePosition(2, 7)

    def test_block_spanning_lines(self) -> None:
        """A multi-line block advances the line count."""
        tokens = list(Reader("\\code{a\nb}\nafter").tokenize())

        code, after = tokens[0], tokens[1]
        assert code.start == SourcePosition(1, 1)
        assert code.end == SourcePosition(2, 3)
        assert after.text == "\nafter"
        assert after.start == SourcePosition(2, 3)
        assert after.end == SourcePosition(3, 6)

    def test_consecutive_lines_of_commands(self) -> None:
        """Commands on consecutive lines report incrementing line numbers."""
        source = "\\paragraph\n\\paragraph\n\\paragraph"
        tokens = list(Reader(source).tokenize())

        calls = [t for t in tokens if t.type == TokenType.FUNCTION_CALL]
        assert [c.start.line for c in calls] == [1, 2, 3]
        assert all(c.start.column == 1 for c in calls)


class TestErrorPositions:
    """Error tokens keep their start and record where reading stopped."""

    def test_unterminated_block(self) -> None:
        """The error spans from the backslash to end of input."""
        tokens = list(Reader("text \\bold{open").tokenize())

        error = tokens[-1]
        assert error.type == TokenType.ERROR
        assert error.message == "Closing brace of block is missing"
        assert error.start == SourcePosition(1, 6)
        assert error.end == SourcePosition(1, 16)
        assert error.text == "\\bold{open"

    def test_trailing_backslash(self) -> None:
        """A lone backslash at EOF fails without consuming it."""
        tokens = list(Reader("abc\\").tokenize())

        error = tokens[-1]
        assert error.type == TokenType.ERROR
        assert error.start == SourcePosition(1, 4)
        assert error.end == SourcePosition(1, 4)

    def test_missing_name(self) -> None:
        """The error position is just past the backslash."""
        tokens = list(Reader("\\ foo").tokenize())

        error = tokens[-1]
        assert error.message == "Expected function name after backslash"
        assert error.start == SourcePosition(1, 1)
        assert error.end == SourcePosition(1, 2)

    def test_error_on_later_line(self) -> None:
        """Errors after newlines report the right line."""
        tokens = list(Reader("one\ntwo\n\\f(a=)").tokenize())

        error = tokens[-1]
        assert error.type == TokenType.ERROR
        assert error.start == SourcePosition(3, 1)
        assert error.end.line == 3


class TestFileIdentity:
    """Tokens carry the file identity for diagnostics."""

    def test_path_and_file_name(self) -> None:
        tokens = list(Reader("x", path="site/blog", file_name="post.sc").tokenize())

        for token in tokens:
            assert token.path == "site/blog"
            assert token.file_name == "post.sc"
