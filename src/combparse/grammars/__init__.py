"""Reference grammars built on the combinator engine.

Available when the ``example-grammars`` capability is enabled:

- :mod:`combparse.grammars.json` - JSON text to Python values
- :mod:`combparse.grammars.semver` - Semantic Versioning 2.0.0 strings

Python 3.13+. Zero external dependencies.
"""

from .json import parse_json, value_parser
from .semver import SemVer, parse_version, semver

__all__ = ["SemVer", "parse_json", "parse_version", "semver", "value_parser"]
