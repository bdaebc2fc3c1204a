"""Tests for the base item parsers.

Every base parser fails without consuming input, and 1-length str/bytes
expectations match across text and byte inputs.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from combparse.core import Failure, Success, parse
from combparse.parsers import (
    empty,
    eof,
    item,
    item_equivalents,
    item_if,
    item_while,
    literal,
    position,
    rest,
    satisfy,
    skip,
    take,
    until,
)

# ============================================================================
# SINGLE ITEMS
# ============================================================================


class TestItem:
    """Test item() and item(x)."""

    def test_empty_input_fails_non_consuming(self) -> None:
        """item() on empty input fails at offset 0."""
        outcome = parse(item(), "")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    @given(text=st.text(min_size=1, max_size=30))
    def test_returns_first_item(self, text: str) -> None:
        """PROPERTY: item() yields the first item and advances by one."""
        outcome = parse(item(), text)

        assert isinstance(outcome, Success)
        assert outcome.value == text[0]
        assert outcome.cursor.pos == 1

    def test_specific_item(self) -> None:
        """item(x) matches only x."""
        assert parse(item("a"), "abc").value == "a"
        assert parse(item("a"), "bca").cursor.pos == 0

    def test_text_pattern_on_bytes(self) -> None:
        """A 1-length str matches the same byte value."""
        outcome = parse(item(","), b",x")

        assert outcome.value == ord(",")
        assert outcome.cursor.pos == 1

    def test_bytes_pattern_on_text(self) -> None:
        """A 1-length bytes matches the same character."""
        assert parse(item(b","), ",x").value == ","

    def test_item_equivalents(self) -> None:
        """Equivalents cover the str, int and bytes forms."""
        assert item_equivalents("a") == ("a", 97)
        assert item_equivalents(b"a") == (b"a", 97, "a")
        assert item_equivalents(5) == (5,)


class TestSatisfy:
    """Test satisfy() and its item_if alias."""

    def test_predicate_holds(self) -> None:
        """The item is consumed when the predicate holds."""
        assert parse(satisfy(str.isdigit), "7x").value == "7"

    def test_predicate_fails(self) -> None:
        """A rejected item is not consumed."""
        outcome = parse(satisfy(str.isdigit), "x7")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_predicate_not_called_at_eof(self) -> None:
        """satisfy fails at EOF without calling the predicate."""
        calls: list[object] = []

        assert not parse(satisfy(lambda v: calls.append(v) is None), "")
        assert calls == []

    def test_alias(self) -> None:
        """item_if is satisfy."""
        assert item_if is satisfy


# ============================================================================
# RUNS
# ============================================================================


class TestLiteral:
    """Test literal runs of items."""

    def test_match(self) -> None:
        """The value is the matched input slice."""
        outcome = parse(literal("true"), "true!")

        assert outcome.value == "true"
        assert outcome.remaining == "!"

    def test_partial_match_does_not_consume(self) -> None:
        """A prefix match fails at the start."""
        outcome = parse(literal("true"), "trux")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_too_short(self) -> None:
        """Input shorter than the literal fails."""
        assert not parse(literal("true"), "tr")

    def test_text_literal_on_bytes(self) -> None:
        """A text literal matches byte input."""
        assert parse(literal("GET"), b"GET /").value == b"GET"

    def test_bytes_literal_on_text(self) -> None:
        """A bytes literal matches text input."""
        assert parse(literal(b"GET"), "GET /").value == "GET"

    def test_token_literal(self) -> None:
        """A literal works on token lists."""
        tokens = ["let", "x", "="]

        assert parse(literal(["let", "x"]), tokens).value == ["let", "x"]


class TestTakeAndSkip:
    """Test take() and skip()."""

    def test_take_single(self) -> None:
        """A 1-length prefix is a single item."""
        assert parse(take("a"), "ab").value == "a"

    def test_take_run(self) -> None:
        """A longer prefix is a run."""
        assert parse(take("ab"), "abc").value == "ab"

    def test_take_non_sequence_item(self) -> None:
        """Any other value is a single item."""
        assert parse(take(3), [3, 4]).value == 3

    def test_skip_discards(self) -> None:
        """skip() yields None and advances."""
        outcome = parse(skip("ab"), "abc")

        assert outcome.value is None
        assert outcome.cursor.pos == 2

    def test_skip_failure(self) -> None:
        """skip() fails without consuming."""
        assert parse(skip("ab"), "ax").cursor.pos == 0


class TestItemWhile:
    """Test item_while()."""

    def test_consumes_prefix(self) -> None:
        """Consumes while the predicate holds."""
        outcome = parse(item_while(str.isdigit), "1234abcd")

        assert outcome.value == "1234"
        assert outcome.remaining == "abcd"

    def test_always_succeeds(self) -> None:
        """No matching item is an empty success."""
        outcome = parse(item_while(str.isdigit), "abc")

        assert isinstance(outcome, Success)
        assert outcome.value == ""

    @given(text=st.text(alphabet="ab", max_size=30))
    def test_matches_naive_prefix(self, text: str) -> None:
        """PROPERTY: consumed length equals the naive count of leading a's."""
        expected = len(text) - len(text.lstrip("a"))

        assert parse(item_while(lambda c: c == "a"), text).cursor.pos == expected


class TestUntil:
    """Test until()."""

    def test_single_item_needle(self) -> None:
        """Consumes through the needle; the value is the part before it."""
        outcome = parse(until("="), "name=value")

        assert outcome.value == "name"
        assert outcome.remaining == "value"

    def test_run_needle(self) -> None:
        """A multi-item needle is consumed as a whole."""
        outcome = parse(until("-->"), "text -->after")

        assert outcome.value == "text "
        assert outcome.remaining == "after"

    def test_missing_needle(self) -> None:
        """No needle fails without consuming."""
        outcome = parse(until("="), "novalue")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_bytes_input(self) -> None:
        """Text needles work on byte input."""
        outcome = parse(until("\r\n"), b"line\r\nnext")

        assert outcome.value == b"line"
        assert outcome.remaining == b"next"

    def test_token_input(self) -> None:
        """Token lists are searched item by item."""
        outcome = parse(until(";"), ["a", "b", ";", "c"])

        assert outcome.value == ["a", "b"]
        assert outcome.cursor.pos == 3

    def test_token_run_needle(self) -> None:
        """Token lists support multi-item needles."""
        outcome = parse(until(["end", "."]), ["x", "end", ".", "y"])

        assert outcome.value == ["x"]
        assert outcome.remaining == ["y"]


# ============================================================================
# POSITION AND END OF INPUT
# ============================================================================


class TestEndOfInput:
    """Test rest(), eof(), empty() and position()."""

    def test_rest(self) -> None:
        """rest() consumes everything."""
        outcome = parse(rest(), "abc")

        assert outcome.value == "abc"
        assert outcome.cursor.is_eof

    def test_eof(self) -> None:
        """eof() succeeds only at the end."""
        assert parse(eof(), "").value is None
        assert not parse(eof(), "x")

    def test_empty(self) -> None:
        """empty() yields the empty remaining slice at the end."""
        assert parse(empty(), b"").value == b""
        assert not parse(empty(), "x")

    def test_position(self) -> None:
        """position() reports the offset without consuming."""
        parser = skip("ab") >> position()
        outcome = parse(parser, "abc")

        assert outcome.value == 2
        assert outcome.cursor.pos == 2


# ============================================================================
# NON-CONSUMING FAILURE
# ============================================================================


@pytest.mark.parametrize(
    "parser",
    [item("z"), satisfy(str.isupper), literal("zz"), until("z"), eof(), empty()],
    ids=["item-z", "satisfy", "literal", "until", "eof", "empty"],
)
def test_base_parsers_fail_non_consuming(parser: object) -> None:
    """Every base parser reports failure at its starting position."""
    outcome = parse(parser, "abc")  # type: ignore[arg-type]

    if isinstance(outcome, Failure):
        assert outcome.cursor.pos == 0
    else:
        pytest.fail(f"{parser!r} unexpectedly matched")
