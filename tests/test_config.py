"""Tests for engine capability configuration."""

import logging
import threading

import pytest

from combparse.config import (
    Capability,
    EngineConfig,
    configured,
    get_config,
    require,
    set_config,
)
from combparse.constants import CAPABILITIES_ENV_VAR
from combparse.diagnostics import (
    CapabilityDisabledError,
    ConfigurationError,
    DiagnosticCode,
)

# ============================================================================
# ENGINE CONFIG
# ============================================================================


class TestEngineConfig:
    """Test EngineConfig construction and queries."""

    def test_default_enables_everything(self) -> None:
        """EngineConfig() enables every capability."""
        config = EngineConfig()

        assert all(config.enabled(cap) for cap in Capability)

    def test_minimal(self) -> None:
        """minimal() enables nothing."""
        config = EngineConfig.minimal()

        assert not any(config.enabled(cap) for cap in Capability)

    def test_of_accepts_names(self) -> None:
        """of() accepts members and string names."""
        config = EngineConfig.of("growable-sequence", Capability.EXAMPLE_GRAMMARS)

        assert config.capabilities == frozenset(
            {Capability.GROWABLE_SEQUENCE, Capability.EXAMPLE_GRAMMARS}
        )

    def test_of_rejects_unknown(self) -> None:
        """Unknown names raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.of("turbo")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.UNKNOWN_CAPABILITY

    def test_post_init_rejects_non_members(self) -> None:
        """Raw strings in capabilities are rejected at construction."""
        with pytest.raises(ConfigurationError):
            EngineConfig(capabilities=frozenset({"growable-sequence"}))  # type: ignore[arg-type]

    def test_with_and_without(self) -> None:
        """with_/without_capabilities return modified copies."""
        base = EngineConfig.minimal()
        added = base.with_capabilities(Capability.GROWABLE_MAPPING)
        removed = added.without_capabilities("growable-mapping")

        assert added.enabled(Capability.GROWABLE_MAPPING)
        assert not removed.enabled(Capability.GROWABLE_MAPPING)
        assert not base.enabled(Capability.GROWABLE_MAPPING)

    def test_frozen(self) -> None:
        """EngineConfig is immutable."""
        with pytest.raises(AttributeError):
            EngineConfig().capabilities = frozenset()  # type: ignore[misc]

    def test_capability_str(self) -> None:
        """Capabilities convert to their names."""
        assert str(Capability.BENCHMARK_HARNESS) == "benchmark-harness"


# ============================================================================
# ENVIRONMENT
# ============================================================================


class TestFromEnv:
    """Test reading COMBPARSE_CAPABILITIES."""

    @pytest.mark.parametrize("raw", ["", "all", "ALL", "  all "])
    def test_all(self, raw: str) -> None:
        """Empty and 'all' enable everything."""
        assert EngineConfig.from_env({CAPABILITIES_ENV_VAR: raw}) == EngineConfig()

    def test_unset(self) -> None:
        """An unset variable enables everything."""
        assert EngineConfig.from_env({}) == EngineConfig()

    def test_none(self) -> None:
        """'none' is the minimal configuration."""
        assert EngineConfig.from_env({CAPABILITIES_ENV_VAR: "none"}) == EngineConfig.minimal()

    def test_list(self) -> None:
        """A comma-separated list enables the named capabilities."""
        config = EngineConfig.from_env(
            {CAPABILITIES_ENV_VAR: "growable-sequence, example-grammars,"}
        )

        assert config == EngineConfig.of(
            Capability.GROWABLE_SEQUENCE, Capability.EXAMPLE_GRAMMARS
        )

    def test_unknown_name(self) -> None:
        """An unknown name raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Unknown capability 'nope'"):
            EngineConfig.from_env({CAPABILITIES_ENV_VAR: "growable-sequence,nope"})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without an explicit mapping, os.environ is read."""
        monkeypatch.setenv(CAPABILITIES_ENV_VAR, "benchmark-harness")

        assert EngineConfig.from_env() == EngineConfig.of(Capability.BENCHMARK_HARNESS)


# ============================================================================
# ACTIVE CONFIGURATION
# ============================================================================


class TestActiveConfig:
    """Test get_config, set_config, configured and require."""

    def test_set_returns_previous(self) -> None:
        """set_config returns the configuration it replaced."""
        original = get_config()
        minimal = EngineConfig.minimal()

        previous = set_config(minimal)
        try:
            assert previous is original
            assert get_config() is minimal
        finally:
            set_config(original)

    def test_configured_restores(self) -> None:
        """configured() restores the previous configuration on exit."""
        original = get_config()

        with configured(EngineConfig.minimal()) as active:
            assert get_config() is active

        assert get_config() is original

    def test_configured_restores_on_error(self) -> None:
        """configured() restores even when the block raises."""
        original = get_config()

        with pytest.raises(RuntimeError), configured(EngineConfig.minimal()):
            msg = "boom"
            raise RuntimeError(msg)

        assert get_config() is original

    def test_require(self) -> None:
        """require raises only for disabled capabilities."""
        require(Capability.GROWABLE_SEQUENCE)

        with configured(EngineConfig.minimal()):
            with pytest.raises(CapabilityDisabledError) as exc_info:
                require(Capability.GROWABLE_SEQUENCE)

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.CAPABILITY_DISABLED
        assert isinstance(exc_info.value, ConfigurationError)

    def test_set_config_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        """Configuration changes are logged at info level."""
        with caplog.at_level(logging.INFO, logger="combparse.config"):
            with configured(EngineConfig.minimal()):
                pass

        assert "Engine capabilities set to: (core only)" in caplog.text

    def test_concurrent_reads(self) -> None:
        """Readers on other threads always see a complete configuration."""
        seen: list[EngineConfig] = []

        def reader() -> None:
            for _ in range(200):
                seen.append(get_config())

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(seen) == 800
        assert all(isinstance(config, EngineConfig) for config in seen)
