"""Semantic Versioning 2.0.0 grammar.

``MAJOR.MINOR.PATCH[-PRE_RELEASE][+BUILD]`` where the pre-release and build
parts are dot-separated identifiers.

Example:
    >>> parse_version("1.2.3-rc.1+build.5")
    SemVer(major=1, minor=2, patch=3, pre_release='rc.1', build='build.5')
    >>> parse_version("1.2") is None
    True

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from combparse.combinators import (
    Separator,
    and_parsed,
    attempt,
    choice,
    get_parsed,
    left,
    lift,
    many1,
    map_if,
    not_empty,
    optional,
    right,
    seq,
)
from combparse.config import Capability, require
from combparse.core import Parser, Success, parse
from combparse.number import integer
from combparse.parsers import empty, item, item_while

__all__ = ["SemVer", "parse_version", "semver"]


@dataclass(frozen=True, slots=True)
class SemVer:
    """Parsed version. Missing pre-release and build parts are empty strings."""

    major: int
    minor: int
    patch: int
    pre_release: str = ""
    build: str = ""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            text += f"-{self.pre_release}"
        if self.build:
            text += f"+{self.build}"
        return text


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_identifier_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "-")


def _component_value(parsed: tuple[str, int]) -> int | None:
    # Leading zeros are rejected unless the whole component is zero.
    text, value = parsed
    if not text.startswith("0") or value == 0:
        return value
    return None


def _version_core() -> Parser[tuple[int, int, int]]:
    component = map_if(and_parsed(integer()), _component_value)
    dotted = left(component, item("."))
    return seq(dotted, dotted, component)


def _identifier_characters() -> Parser[str]:
    return not_empty(item_while(_is_identifier_char))


def _numeric_identifier() -> Parser[str]:
    digits = not_empty(item_while(_is_digit))
    return digits.filter(lambda d: len(d) == 1 or not d.startswith("0"))


def _alphanumeric_identifier() -> Parser[str]:
    return get_parsed(right(optional(item_while(_is_digit)), _identifier_characters()))


def _dot_separated(prefix: str, identifier: Parser[str]) -> Parser[str]:
    return attempt(right(item(prefix), many1(identifier, separator=Separator(item(".")))))


def semver() -> Parser[SemVer]:
    """Parser for a complete version string.

    Raises:
        CapabilityDisabledError: If ``example-grammars`` is disabled
    """
    require(Capability.EXAMPLE_GRAMMARS)
    pre_release_identifier = choice(attempt(_alphanumeric_identifier()), _numeric_identifier())
    pre_release = _dot_separated("-", pre_release_identifier)
    build = _dot_separated("+", _identifier_characters())

    def assemble(core: tuple[int, int, int], pre: str | None, meta: str | None) -> SemVer:
        return SemVer(*core, pre_release=pre or "", build=meta or "")

    version = lift(assemble, _version_core(), optional(pre_release), optional(build))
    return left(version, empty()).named("semver")


def parse_version(text: str) -> SemVer | None:
    """Parse ``text`` as a version, returning None when it is not one."""
    outcome = parse(semver(), text)
    if isinstance(outcome, Success):
        return outcome.value
    return None
