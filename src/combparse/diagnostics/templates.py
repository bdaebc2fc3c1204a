"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Every template returns a Diagnostic that the exception classes in
    :mod:`combparse.diagnostics.errors` accept directly.
    """

    @staticmethod
    def empty_pattern_set(combinator: str) -> Diagnostic:
        """Pattern-alternation helper called with no patterns.

        Args:
            combinator: Name of the helper (item_matches, choose)

        Returns:
            Diagnostic for EMPTY_PATTERN_SET
        """
        return Diagnostic(
            code=DiagnosticCode.EMPTY_PATTERN_SET,
            message=f"{combinator}() requires at least one pattern",
            hint="Pass literal items or ItemRange bounds",
        )

    @staticmethod
    def invalid_range(low: object, high: object) -> Diagnostic:
        """Inclusive range with low bound above high bound.

        Args:
            low: Lower bound
            high: Upper bound

        Returns:
            Diagnostic for INVALID_PATTERN
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_PATTERN,
            message=f"Invalid item range: {low!r} > {high!r}",
            hint="ItemRange bounds are inclusive and must satisfy low <= high",
        )

    @staticmethod
    def invalid_byte_target(target: object) -> Diagnostic:
        """Scanning target that cannot be represented as a single byte.

        Args:
            target: The rejected target

        Returns:
            Diagnostic for INVALID_BYTE_TARGET
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_BYTE_TARGET,
            message=f"Invalid byte target: {target!r}",
            hint="Use an int in 0..255, a 1-length bytes, or a 1-length str below U+0100",
        )

    @staticmethod
    def empty_finder_set() -> Diagnostic:
        """Byte scanner called without targets."""
        return Diagnostic(
            code=DiagnosticCode.EMPTY_FINDER_SET,
            message="Byte scanning requires at least one target",
        )

    @staticmethod
    def invalid_repetition(name: str, value: int) -> Diagnostic:
        """Negative repetition count or non-positive capacity.

        Args:
            name: Parameter name
            value: Rejected value

        Returns:
            Diagnostic for INVALID_REPETITION
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_REPETITION,
            message=f"Invalid {name}: {value}",
            hint=f"{name} must not be negative",
        )

    @staticmethod
    def forward_undefined(name: str) -> Diagnostic:
        """Forward declaration run before define() was called.

        Args:
            name: Forward parser name

        Returns:
            Diagnostic for FORWARD_UNDEFINED
        """
        return Diagnostic(
            code=DiagnosticCode.FORWARD_UNDEFINED,
            message=f"Forward parser '{name}' was run before being defined",
            hint="Call define() on the forward declaration before parsing",
        )

    @staticmethod
    def forward_redefined(name: str) -> Diagnostic:
        """Forward declaration defined twice.

        Args:
            name: Forward parser name

        Returns:
            Diagnostic for FORWARD_REDEFINED
        """
        return Diagnostic(
            code=DiagnosticCode.FORWARD_REDEFINED,
            message=f"Forward parser '{name}' is already defined",
            hint="A forward declaration can be defined exactly once",
        )

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Recursive grammar nested deeper than the configured limit.

        Args:
            max_depth: Maximum allowed depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum recursion depth ({max_depth}) exceeded",
            hint="Pass a larger max_depth to parse() or flatten the grammar",
        )

    @staticmethod
    def capability_disabled(capability: str) -> Diagnostic:
        """Allocating variant requested while its capability is off.

        Args:
            capability: Capability name

        Returns:
            Diagnostic for CAPABILITY_DISABLED
        """
        return Diagnostic(
            code=DiagnosticCode.CAPABILITY_DISABLED,
            message=f"Capability '{capability}' is disabled",
            hint="Enable it via EngineConfig or the COMBPARSE_CAPABILITIES variable",
        )

    @staticmethod
    def unknown_capability(name: str) -> Diagnostic:
        """Capability name not recognized.

        Args:
            name: The unrecognized name

        Returns:
            Diagnostic for UNKNOWN_CAPABILITY
        """
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_CAPABILITY,
            message=f"Unknown capability '{name}'",
        )

    @staticmethod
    def invalid_config_value(name: str, value: object) -> Diagnostic:
        """Configuration value outside its valid range.

        Args:
            name: Setting name
            value: Rejected value

        Returns:
            Diagnostic for INVALID_CONFIG_VALUE
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_CONFIG_VALUE,
            message=f"Invalid value for {name}: {value!r}",
        )
