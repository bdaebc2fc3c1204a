"""Tests for ASCII whitespace skipping."""

from hypothesis import given
from hypothesis import strategies as st

from combparse.combinators import choice, many_to_list
from combparse.core import Failure, parse
from combparse.number import integer
from combparse.parsers import item, literal
from combparse.whitespace import eat, ignore_ascii_whitespace


class TestIgnoreWhitespace:
    """Test ignore_ascii_whitespace()."""

    def test_skips_all_kinds(self) -> None:
        """Space, tab, newline, carriage return and form feed are skipped."""
        outcome = parse(ignore_ascii_whitespace(), " \t\n\r\fx")

        assert outcome.value is None
        assert outcome.cursor.pos == 5

    def test_always_succeeds(self) -> None:
        """No whitespace is an empty success."""
        assert parse(ignore_ascii_whitespace(), "x").cursor.pos == 0
        assert parse(ignore_ascii_whitespace(), "")

    def test_vertical_tab_is_not_skipped(self) -> None:
        """Only the five ASCII whitespace characters count."""
        assert parse(ignore_ascii_whitespace(), "\vx").cursor.pos == 0

    def test_bytes(self) -> None:
        """Byte input skips whitespace byte values."""
        assert parse(ignore_ascii_whitespace(), b"  \nz").cursor.pos == 3

    @given(text=st.text(alphabet=" \t\nab", max_size=30))
    def test_matches_lstrip(self, text: str) -> None:
        """PROPERTY: the skipped length equals what lstrip removes."""
        expected = len(text) - len(text.lstrip(" \t\n"))

        assert parse(ignore_ascii_whitespace(), text).cursor.pos == expected


class TestEat:
    """Test eat()."""

    def test_skips_then_parses(self) -> None:
        """Leading whitespace is skipped before p."""
        assert parse(eat(integer()), "  \n 42").value == 42

    def test_no_whitespace(self) -> None:
        """eat(p) without leading whitespace behaves as p."""
        assert parse(eat(integer()), "42").value == 42

    def test_failure_after_whitespace_is_non_consuming(self) -> None:
        """Whitespace alone does not count as consumption."""
        outcome = parse(eat(integer()), "   x")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_consuming_failure_kept(self) -> None:
        """A failure after p consumed input keeps its position."""
        parser = eat(literal("ab") >> item("c"))
        outcome = parse(parser, "  abx")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 4

    def test_choice_moves_on(self) -> None:
        """choice tries the next alternative after an eaten failure."""
        parser = choice(eat(integer()), eat(item("x")))

        assert parse(parser, "  x").value == "x"

    def test_token_lists(self) -> None:
        """Whitespace separated items collect into a list."""
        parser = many_to_list(eat(integer()))

        assert parse(parser, " 1  22\t333 ").value == [1, 22, 333]
