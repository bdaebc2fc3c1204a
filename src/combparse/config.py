"""Engine capability configuration.

The no-allocation core (fixed-capacity arrays, folds, state folds and the
discarding sink) is always available. Allocating variants and optional
components are switched on by capability flags:

- ``growable-sequence``: collect repetitions into a list
- ``growable-mapping``: collect key/value repetitions into a dict
- ``example-grammars``: the JSON and SemVer reference grammars
- ``benchmark-harness``: the ``combparse-bench`` throughput harness

The active :class:`EngineConfig` is process-wide. It is read when sinks and
grammars are constructed, never while a parser runs, so parser values stay
free of hidden shared state.

Example:
    >>> from combparse.config import Capability, EngineConfig, configured, get_config
    >>> with configured(EngineConfig.minimal()):
    ...     get_config().enabled(Capability.GROWABLE_SEQUENCE)
    False

Python 3.13+.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from threading import RLock

from combparse.constants import CAPABILITIES_ENV_VAR
from combparse.diagnostics import (
    CapabilityDisabledError,
    ConfigurationError,
    ErrorTemplate,
)

__all__ = [
    "Capability",
    "EngineConfig",
    "configured",
    "get_config",
    "require",
    "set_config",
]

logger = logging.getLogger(__name__)


class Capability(StrEnum):
    """Optional engine capability.

    StrEnum provides automatic string conversion:
    str(Capability.GROWABLE_SEQUENCE) == "growable-sequence"
    """

    GROWABLE_SEQUENCE = "growable-sequence"
    """Repetition into a growable list"""

    GROWABLE_MAPPING = "growable-mapping"
    """Repetition into insertion-ordered or key-sorted dicts"""

    EXAMPLE_GRAMMARS = "example-grammars"
    """JSON DOM and SemVer reference grammars"""

    BENCHMARK_HARNESS = "benchmark-harness"
    """Standalone throughput benchmark entry point"""


def _all_capabilities() -> frozenset[Capability]:
    return frozenset(Capability)


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable capability set.

    Constructing ``EngineConfig()`` with no arguments enables every
    capability.

    Attributes:
        capabilities: Enabled optional capabilities
    """

    capabilities: frozenset[Capability] = field(default_factory=_all_capabilities)

    def __post_init__(self) -> None:
        """Validate capability members at construction time.

        Raises:
            ConfigurationError: If an entry is not a Capability
        """
        for cap in self.capabilities:
            if not isinstance(cap, Capability):
                raise ConfigurationError(ErrorTemplate.unknown_capability(str(cap)))

    @classmethod
    def of(cls, *capabilities: Capability | str) -> EngineConfig:
        """Build a config from capability members or their string names."""
        return cls(capabilities=frozenset(_coerce(capabilities)))

    @classmethod
    def minimal(cls) -> EngineConfig:
        """The no-allocation core only."""
        return cls(capabilities=frozenset())

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Read capabilities from ``COMBPARSE_CAPABILITIES``.

        The variable holds comma-separated capability names, or ``all`` /
        ``none``. Unset or empty means ``all``.

        Raises:
            ConfigurationError: If a name is not a known capability
        """
        env = os.environ if environ is None else environ
        raw = env.get(CAPABILITIES_ENV_VAR, "").strip().lower()
        if raw in ("", "all"):
            return cls()
        if raw == "none":
            return cls.minimal()
        return cls.of(*(part.strip() for part in raw.split(",") if part.strip()))

    def enabled(self, capability: Capability) -> bool:
        """Check whether a capability is enabled."""
        return capability in self.capabilities

    def with_capabilities(self, *capabilities: Capability | str) -> EngineConfig:
        """Return a copy with additional capabilities enabled."""
        return EngineConfig(capabilities=self.capabilities | frozenset(_coerce(capabilities)))

    def without_capabilities(self, *capabilities: Capability | str) -> EngineConfig:
        """Return a copy with the given capabilities disabled."""
        return EngineConfig(capabilities=self.capabilities - frozenset(_coerce(capabilities)))


def _coerce(names: Iterable[Capability | str]) -> Iterator[Capability]:
    for name in names:
        try:
            yield Capability(name)
        except ValueError as e:
            raise ConfigurationError(ErrorTemplate.unknown_capability(str(name))) from e


_lock = RLock()
_active: EngineConfig = EngineConfig.from_env()


def get_config() -> EngineConfig:
    """Return the active engine configuration."""
    with _lock:
        return _active


def set_config(config: EngineConfig) -> EngineConfig:
    """Install a new engine configuration and return the previous one."""
    global _active  # noqa: PLW0603 - process-wide configuration
    with _lock:
        previous = _active
        _active = config
    logger.info(
        "Engine capabilities set to: %s",
        ", ".join(sorted(config.capabilities)) or "(core only)",
    )
    return previous


@contextmanager
def configured(config: EngineConfig) -> Iterator[EngineConfig]:
    """Temporarily install ``config``, restoring the previous one on exit."""
    previous = set_config(config)
    try:
        yield config
    finally:
        set_config(previous)


def require(capability: Capability) -> None:
    """Check that a capability is enabled.

    Raises:
        CapabilityDisabledError: If the capability is disabled
    """
    if not get_config().enabled(capability):
        raise CapabilityDisabledError(ErrorTemplate.capability_disabled(str(capability)))
