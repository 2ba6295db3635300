"""Property-based tests for renderer and tag stack invariants.

Documents are generated from a small vocabulary of SC fragments so that
nearly every example exercises lists, tables and sections together.
"""

import html
import re

from hypothesis import given, settings
from hypothesis import strategies as st

from scmark import render
from scmark.errors import RenderError
from scmark.stringbuilder import StringBuilder
from scmark.tags import SECTION_KINDS, TagKind, TagStack
from scmark.utils.text import escape_html, is_all_whitespace

FRAGMENTS = [
    "word ",
    "x & <y> ",
    "\n",
    "  ",
    "\\\\",
    "\\section{S}",
    "\\subsection{T}",
    "\\paragraph ",
    "\\ordered_list ",
    "\\unordered_list ",
    "\\horizontal_list ",
    "\\item ",
    "\\hitem ",
    "\\row ",
    "\\table ",
    "\\table{Cap}",
    "\\bold{b}",
    "\\italic{i}",
    "\\inline{c}",
    "\\code{\nc < d\n}",
    "\\quote{q}",
    '\\image(url="i.png")',
    '\\link(url="u"){l}',
]

documents = st.lists(st.sampled_from(FRAGMENTS), max_size=30).map("".join)

# Text with none of the characters escape_html rewrites
plain_text = st.text(alphabet=st.characters(exclude_characters='"&<>'), max_size=100)

_TAG = re.compile(r"<(/?)([a-z0-9]+)[^>]*>")
_VOID_TAGS = frozenset({"img", "hr"})

# Elements that may only be opened directly inside one of the given parents
_PARENTS = {
    "p": {"article", "section"},
    "li": {"ol", "ul"},
    "tr": {"table"},
    "td": {"tr"},
    "th": {"tr"},
    "table": {"div"},
}


def open_elements(output: str, *, check_parents: bool = True) -> list[str]:
    """Replay the output's tags, asserting proper nesting.

    Returns:
        Elements still open at the end of the output
    """
    stack: list[str] = []
    for match in _TAG.finditer(output):
        closing, name = match.group(1) == "/", match.group(2)
        if name in _VOID_TAGS:
            continue
        if closing:
            assert stack, f"</{name}> with nothing open"
            assert stack[-1] == name, f"</{name}> closes <{stack[-1]}>"
            stack.pop()
        else:
            if check_parents and name in _PARENTS:
                assert stack and stack[-1] in _PARENTS[name], f"<{name}> inside {stack[-1:]}"
            stack.append(name)
    return stack


class TestOutputWellFormed:
    """Successful renders always produce properly nested HTML."""

    @given(documents)
    @settings(max_examples=400)
    def test_tags_balance(self, source: str) -> None:
        try:
            output = render(source)
        except RenderError:
            return
        assert open_elements(output) == []

    @given(documents)
    @settings(max_examples=200)
    def test_single_article_wrapper(self, source: str) -> None:
        try:
            output = render(source)
        except RenderError:
            return
        assert output.startswith("<article>\n")
        assert output.endswith("</article>\n")
        assert output.count("<article>") == 1

    @given(documents)
    @settings(max_examples=200)
    def test_rendering_is_deterministic(self, source: str) -> None:
        try:
            first = render(source)
        except RenderError:
            return
        assert render(source) == first

    @given(st.text(alphabet="ab <>&\"'\n", max_size=50))
    def test_plain_text_round_trips_through_unescape(self, text: str) -> None:
        output = render(text)
        body = output.removeprefix("<article>\n").removesuffix("</article>\n")
        if is_all_whitespace(text):
            assert body == text
        else:
            body = body.removeprefix("<p>\n").removesuffix("</p>\n")
            assert html.unescape(body) == text.removeprefix("\n")


class TestEscape:
    """escape_html output is safe to embed and reversible."""

    @given(st.text(max_size=100))
    def test_no_raw_specials(self, text: str) -> None:
        escaped = escape_html(text)
        assert "<" not in escaped
        assert ">" not in escaped
        assert '"' not in escaped

    @given(plain_text)
    def test_text_without_specials_unchanged(self, text: str) -> None:
        assert escape_html(text) == text

    @given(plain_text)
    def test_idempotent_on_plain_text(self, text: str) -> None:
        once = escape_html(text)
        assert escape_html(once) == once

    @given(st.text(max_size=100))
    def test_unescape_inverts(self, text: str) -> None:
        assert html.unescape(escape_html(text)) == text


class TestTagStackInvariants:
    """section_depth always equals the number of open ARTICLE/SECTION tags."""

    kinds = st.sampled_from([kind for kind in TagKind if kind is not TagKind.ROOT])
    operations = st.lists(
        st.one_of(
            st.tuples(st.just("push"), kinds),
            st.tuples(st.just("pop"), st.none()),
            st.tuples(st.just("rise"), st.none()),
            st.tuples(st.just("level"), st.integers(min_value=1, max_value=4)),
        ),
        max_size=40,
    )

    @given(operations)
    @settings(max_examples=300)
    def test_section_depth_matches_stack(self, ops: list) -> None:
        sb = StringBuilder()
        tags = TagStack(sb, capacity=1000)
        tags.push(TagKind.ARTICLE)

        for op, arg in ops:
            if op == "push":
                tags.push(arg)
            elif op == "pop" and len(tags) > 0:
                tags.pop()
            elif op == "rise":
                tags.rise_to_lowest_section()
            elif op == "level":
                tags.rise_to_section_level(arg)
                assert tags.section_depth == arg
            assert tags.section_depth == sum(1 for k in tags.kinds() if k in SECTION_KINDS)

        tags.close_all()
        assert len(tags) == 0
        assert tags.section_depth == 0
        assert open_elements(sb.build(), check_parents=False) == []
