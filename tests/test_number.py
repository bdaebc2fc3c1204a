"""Tests for decimal number parsers."""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from combparse.core import Failure, parse
from combparse.number import (
    IntKind,
    float_,
    float_checked,
    integer,
    integer_checked,
    integer_signed,
    integer_signed_checked,
)

# ============================================================================
# INT KIND
# ============================================================================


class TestIntKind:
    """Test IntKind geometry."""

    @pytest.mark.parametrize(
        ("kind", "bounds"),
        [
            (IntKind.U8, (0, 255)),
            (IntKind.I8, (-128, 127)),
            (IntKind.U64, (0, 2**64 - 1)),
            (IntKind.I64, (-(2**63), 2**63 - 1)),
            (IntKind.U128, (0, 2**128 - 1)),
            (IntKind.I128, (-(2**127), 2**127 - 1)),
        ],
    )
    def test_bounds(self, kind: IntKind, bounds: tuple[int, int]) -> None:
        """Bounds follow the bit width and signedness."""
        assert kind.bounds == bounds

    def test_properties(self) -> None:
        """bits and signed derive from the name."""
        assert IntKind.U32.bits == 32
        assert not IntKind.U32.signed
        assert IntKind.I16.signed
        assert str(IntKind.I16) == "i16"


# ============================================================================
# INTEGERS
# ============================================================================


class TestInteger:
    """Test integer parsers."""

    def test_leftover(self) -> None:
        """'123abc' parses to 123 with 'abc' remaining."""
        outcome = parse(integer(), "123abc")

        assert outcome.value == 123
        assert outcome.remaining == "abc"

    def test_no_digits(self) -> None:
        """No leading digit fails without consuming."""
        outcome = parse(integer(), "abc")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_unsigned_rejects_minus(self) -> None:
        """integer() does not accept a sign."""
        assert not parse(integer(), "-5")

    def test_bytes_and_char_lists(self) -> None:
        """Digits may be bytes or 1-length strings in a list."""
        assert parse(integer(), b"42;").value == 42
        assert parse(integer(), ["4", "2", ";"]).value == 42
        assert parse(integer(), [b"7"]).value == 7

    def test_big_values(self) -> None:
        """Unchecked parsers accept arbitrary length."""
        digits = "9" * 60

        assert parse(integer(), digits).value == int(digits)

    @given(n=st.integers(min_value=0, max_value=10**30))
    def test_roundtrip_text(self, n: int) -> None:
        """PROPERTY: integer() reads back str(n)."""
        assert parse(integer(), str(n)).value == n

    def test_signed(self) -> None:
        """integer_signed accepts an optional minus."""
        assert parse(integer_signed(), "-17x").value == -17
        assert parse(integer_signed(), "17").value == 17
        assert parse(integer_signed(), b"-3").value == -3

    def test_lone_minus(self) -> None:
        """A minus without digits fails without consuming."""
        outcome = parse(integer_signed(), "-x")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0


class TestCheckedInteger:
    """Test overflow-checked integer parsers."""

    def test_within_bounds(self) -> None:
        """Values that fit are accepted."""
        assert parse(integer_checked(IntKind.U8), "255").value == 255

    def test_overflow(self) -> None:
        """Overflow fails without consuming."""
        outcome = parse(integer_checked(IntKind.U8), "256")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_default_kind_u64(self) -> None:
        """The default unsigned kind is u64."""
        assert parse(integer_checked(), str(2**64 - 1)).value == 2**64 - 1
        assert not parse(integer_checked(), str(2**64))

    def test_signed_bounds(self) -> None:
        """Signed bounds are asymmetric."""
        parser = integer_signed_checked(IntKind.I8)

        assert parse(parser, "-128").value == -128
        assert not parse(parser, "128")
        assert not parse(parser, "-129")

    def test_default_kind_i64(self) -> None:
        """The default signed kind is i64."""
        assert parse(integer_signed_checked(), str(-(2**63))).value == -(2**63)
        assert not parse(integer_signed_checked(), str(2**63))


# ============================================================================
# FLOATS
# ============================================================================


class TestFloat:
    """Test float parsers."""

    @pytest.mark.parametrize(
        ("text", "value", "end"),
        [
            ("3", 3.0, 1),
            ("-12.50", -12.5, 6),
            ("0.001", 0.001, 5),
            ("-0.5", -0.5, 4),
            ("7.x", 7.0, 1),
            ("1.", 1.0, 1),
        ],
    )
    def test_values(self, text: str, value: float, end: int) -> None:
        """Integer part with optional fraction."""
        outcome = parse(float_(), text)

        assert outcome.value == value
        assert outcome.cursor.pos == end

    def test_bytes(self) -> None:
        """Byte input works."""
        assert parse(float_(), b"2.25").value == 2.25

    def test_no_digits(self) -> None:
        """A leading dot is not a number."""
        assert not parse(float_(), ".5")

    def test_checked(self) -> None:
        """float_checked bounds the integer part."""
        parser = float_checked(IntKind.I8)

        assert parse(parser, "-128.75").value == -128.75
        assert not parse(parser, "128.0")

    @given(
        whole=st.integers(min_value=-(10**6), max_value=10**6),
        fraction=st.integers(min_value=0, max_value=999),
    )
    def test_matches_builtin_float(self, whole: int, fraction: int) -> None:
        """PROPERTY: the value equals float() of the same text."""
        text = f"{whole}.{fraction:03d}"

        assert parse(float_(), text).value == float(text)

    def test_negative_zero(self) -> None:
        """The sign of -0 is kept."""
        value = parse(float_(), "-0").value

        assert value == 0.0
        assert math.copysign(1.0, value) == -1.0

    def test_long_integer_part(self) -> None:
        """An integer part beyond the float range gives inf."""
        text = "1" * 400

        assert parse(float_(), text).value == math.inf
        assert parse(float_(), "-" + text).value == -math.inf
        assert parse(float_(), b"9" * 400).value == math.inf

    def test_long_fraction(self) -> None:
        """Thousands of fraction digits round like float()."""
        text = "1." + "5" * 5000
        outcome = parse(float_(), text)

        assert outcome.value == float(text)
        assert outcome.cursor.pos == len(text)

    def test_checked_long_fraction(self) -> None:
        """float_checked accepts a long fraction when the integer part fits."""
        text = "-3." + "25" * 3000

        assert parse(float_checked(IntKind.I8), text).value == float(text)

    def test_checked_long_integer_part(self) -> None:
        """float_checked fails without consuming when the integer part overflows."""
        outcome = parse(float_checked(), "1" * 400 + ".5")

        assert isinstance(outcome, Failure)
        assert outcome.cursor.pos == 0

    def test_token_list(self) -> None:
        """A list of 1-length tokens gives the same value as the text."""
        assert parse(float_(), ["-", "4", ".", "2", "5"]).value == -4.25
