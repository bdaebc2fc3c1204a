"""combparse - generic parser-combinator engine.

Build recursive-descent parsers by composing small parsing functions. No
grammar compiler and no generated code: a parser is an ordinary value that
is built once and run against any number of inputs (text, bytes or token
sequences), optionally threading a caller-owned mutable state.

Public API:
    Parser, Success, Failure, parse - Parser values, outcomes, entry point
    item, satisfy, literal, until, ... - Base parsers
    seq, choice, many, chain, ... - Combinator algebra
    find_byte, until_byte - Word-at-a-time byte scanning
    item_matches, choose - Pattern alternation
    defer, Forward - Recursive grammars
    EngineConfig, Capability - Optional capability flags

Exceptions:
    CombparseError - Base exception class
    PatternError - Invalid pattern sets and byte targets
    GrammarDefinitionError - Forward declaration misuse
    DepthLimitExceededError - Recursive nesting beyond max_depth
    ConfigurationError, CapabilityDisabledError - Configuration errors

Submodules:
    combparse.sinks - Accumulators for repetitions
    combparse.number - Decimal number parsers
    combparse.whitespace - ASCII whitespace skipping
    combparse.grammars - JSON and SemVer reference grammars
    combparse.benchmark - Throughput harness (``combparse-bench``)
"""

from .combinators import (
    Separator,
    and_parsed,
    attempt,
    bind,
    chain,
    choice,
    choice_diff,
    count_consumed,
    filter_,
    fold,
    fold_state,
    get_parsed,
    greedy_choice,
    into_type,
    left,
    lift,
    lift_to_state,
    many,
    many1,
    many_to_array,
    many_to_dict,
    many_to_list,
    many_to_sorted_dict,
    map_,
    map_if,
    middle,
    not_empty,
    not_followed_by,
    optional,
    peek,
    right,
    seq,
    seq2,
    seq3,
    spanned,
    succeed,
    times,
)
from .config import Capability, EngineConfig, configured, get_config, set_config
from .context import ParseContext
from .core import (
    Failure,
    Outcome,
    Parser,
    Success,
    create_parser,
    failure,
    parse,
    pure,
    success,
)
from .cursor import Cursor, LineOffsetCache, Span
from .diagnostics import (
    CapabilityDisabledError,
    CombparseError,
    ConfigurationError,
    DepthLimitExceededError,
    GrammarDefinitionError,
    PatternError,
)
from .findbyte import (
    EqByte,
    GtByte,
    LtByte,
    NeByte,
    find_byte,
    find_byte_index,
    find_byte_keep,
    until_byte,
)
from .parsers import (
    empty,
    eof,
    item,
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
from .pattern import ItemRange, choose, irange, item_matches
from .recursive import Forward, defer
from .sinks import (
    ArraySink,
    DictSink,
    DiscardSink,
    FixedArray,
    FoldSink,
    ListSink,
    SortedDictSink,
    StateFoldSink,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("combparse")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ArraySink",
    "Capability",
    "CapabilityDisabledError",
    "CombparseError",
    "ConfigurationError",
    "Cursor",
    "DepthLimitExceededError",
    "DictSink",
    "DiscardSink",
    "EngineConfig",
    "EqByte",
    "Failure",
    "FixedArray",
    "FoldSink",
    "Forward",
    "GrammarDefinitionError",
    "GtByte",
    "ItemRange",
    "LineOffsetCache",
    "ListSink",
    "LtByte",
    "NeByte",
    "Outcome",
    "ParseContext",
    "Parser",
    "PatternError",
    "Separator",
    "SortedDictSink",
    "Span",
    "StateFoldSink",
    "Success",
    "__version__",
    "and_parsed",
    "attempt",
    "bind",
    "chain",
    "choice",
    "choice_diff",
    "choose",
    "configured",
    "count_consumed",
    "create_parser",
    "defer",
    "empty",
    "eof",
    "failure",
    "filter_",
    "find_byte",
    "find_byte_index",
    "find_byte_keep",
    "fold",
    "fold_state",
    "get_config",
    "get_parsed",
    "greedy_choice",
    "into_type",
    "irange",
    "item",
    "item_if",
    "item_matches",
    "item_while",
    "left",
    "lift",
    "lift_to_state",
    "literal",
    "many",
    "many1",
    "many_to_array",
    "many_to_dict",
    "many_to_list",
    "many_to_sorted_dict",
    "map_",
    "map_if",
    "middle",
    "not_empty",
    "not_followed_by",
    "optional",
    "parse",
    "peek",
    "position",
    "pure",
    "rest",
    "right",
    "satisfy",
    "seq",
    "seq2",
    "seq3",
    "set_config",
    "skip",
    "spanned",
    "succeed",
    "success",
    "take",
    "times",
    "until",
    "until_byte",
]
