"""Tests for diagnostic codes, templates and the exception hierarchy."""

import pytest

from combparse.diagnostics import (
    CapabilityDisabledError,
    CombparseError,
    ConfigurationError,
    DepthLimitExceededError,
    Diagnostic,
    DiagnosticCode,
    ErrorTemplate,
    GrammarDefinitionError,
    PatternError,
)

# ============================================================================
# DIAGNOSTIC
# ============================================================================


class TestDiagnostic:
    """Test Diagnostic formatting."""

    def test_str_is_message(self) -> None:
        """str() returns the bare message."""
        diagnostic = Diagnostic(DiagnosticCode.INVALID_PATTERN, "bad pattern", "fix it")

        assert str(diagnostic) == "bad pattern"

    def test_format_error_with_hint(self) -> None:
        """format_error renders a compiler-style message with help."""
        diagnostic = ErrorTemplate.empty_pattern_set("item_matches")

        assert diagnostic.format_error() == (
            "error[EMPTY_PATTERN_SET]: item_matches() requires at least one pattern\n"
            "  = help: Pass literal items or ItemRange bounds"
        )

    def test_format_error_without_hint(self) -> None:
        """No help line without a hint."""
        diagnostic = ErrorTemplate.empty_finder_set()

        assert diagnostic.format_error() == (
            "error[EMPTY_FINDER_SET]: Byte scanning requires at least one target"
        )

    def test_codes_unique(self) -> None:
        """Every code has a distinct value."""
        values = [code.value for code in DiagnosticCode]

        assert len(values) == len(set(values))


# ============================================================================
# TEMPLATES
# ============================================================================


class TestTemplates:
    """Each template produces the expected code and mentions its arguments."""

    @pytest.mark.parametrize(
        ("diagnostic", "code", "fragment"),
        [
            (ErrorTemplate.empty_pattern_set("choose"), DiagnosticCode.EMPTY_PATTERN_SET, "choose"),
            (ErrorTemplate.invalid_range("z", "a"), DiagnosticCode.INVALID_PATTERN, "'z' > 'a'"),
            (ErrorTemplate.invalid_byte_target(300), DiagnosticCode.INVALID_BYTE_TARGET, "300"),
            (
                ErrorTemplate.invalid_repetition("times", -2),
                DiagnosticCode.INVALID_REPETITION,
                "-2",
            ),
            (ErrorTemplate.forward_undefined("expr"), DiagnosticCode.FORWARD_UNDEFINED, "expr"),
            (ErrorTemplate.forward_redefined("expr"), DiagnosticCode.FORWARD_REDEFINED, "expr"),
            (ErrorTemplate.depth_exceeded(50), DiagnosticCode.MAX_DEPTH_EXCEEDED, "(50)"),
            (
                ErrorTemplate.capability_disabled("growable-mapping"),
                DiagnosticCode.CAPABILITY_DISABLED,
                "growable-mapping",
            ),
            (ErrorTemplate.unknown_capability("x"), DiagnosticCode.UNKNOWN_CAPABILITY, "'x'"),
            (
                ErrorTemplate.invalid_config_value("max_depth", 0),
                DiagnosticCode.INVALID_CONFIG_VALUE,
                "max_depth",
            ),
        ],
    )
    def test_template(self, diagnostic: Diagnostic, code: DiagnosticCode, fragment: str) -> None:
        """Template code and message."""
        assert diagnostic.code == code
        assert fragment in diagnostic.message


# ============================================================================
# EXCEPTIONS
# ============================================================================


class TestExceptions:
    """Test the exception hierarchy."""

    def test_diagnostic_attached(self) -> None:
        """Exceptions built from a Diagnostic carry it and format it."""
        diagnostic = ErrorTemplate.depth_exceeded(10)
        error = DepthLimitExceededError(diagnostic)

        assert error.diagnostic is diagnostic
        assert str(error) == diagnostic.format_error()

    def test_plain_message(self) -> None:
        """Exceptions also accept a plain message."""
        msg = "plain failure"
        error = CombparseError(msg)

        assert error.diagnostic is None
        assert str(error) == msg

    @pytest.mark.parametrize(
        "error_type",
        [
            PatternError,
            GrammarDefinitionError,
            DepthLimitExceededError,
            ConfigurationError,
            CapabilityDisabledError,
        ],
    )
    def test_all_derive_from_base(self, error_type: type[CombparseError]) -> None:
        """Every error is a CombparseError."""
        assert issubclass(error_type, CombparseError)

    def test_value_error_compatibility(self) -> None:
        """Invalid-value errors are also ValueErrors."""
        assert issubclass(PatternError, ValueError)
        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(CapabilityDisabledError, ConfigurationError)
        assert not issubclass(DepthLimitExceededError, ValueError)
