"""Custom exceptions for kingme-core.

The analysis functions never raise for data-shaped problems: malformed
balances, unknown frequency labels and missing account links are all
resolved by defaulting. Exceptions are reserved for the package's edges,
where a snapshot is loaded or logging is configured. All of them inherit
from KingMeError.

Example:
    try:
        profile = load_profile(raw_json)
    except SnapshotError as e:
        logger.error("snapshot_rejected", errors=e.errors)
        raise
"""

from typing import Any, Optional


class KingMeError(Exception):
    """Base exception for all kingme-core errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class SnapshotError(KingMeError):
    """Raised when a profile snapshot cannot be validated.

    Attributes:
        field: Dotted location of the first failing field (if known).
        errors: Flattened list of validation errors, one dict per failure
            with ``loc`` and ``msg`` keys.

    Example:
        >>> raise SnapshotError(
        ...     "Invalid profile snapshot",
        ...     field="debts.0.monthlyPayment",
        ...     errors=[{"loc": "debts.0.monthlyPayment", "msg": "Input should be a valid decimal"}],
        ... )
        SnapshotError: Invalid profile snapshot
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize SnapshotError.

        Args:
            message: Human-readable error description.
            field: Location of the first field that failed validation.
            errors: All validation failures.
            details: Optional dictionary with additional context.
            recoverable: Whether the caller can fix the snapshot and retry.
                Defaults to True since the fix is a data correction.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.errors = errors or []

        if field:
            self.details["field"] = field
        if self.errors:
            self.details["error_count"] = len(self.errors)


class ConfigurationError(KingMeError):
    """Raised when runtime configuration is invalid.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "KingMeError",
    "SnapshotError",
    "ConfigurationError",
]
