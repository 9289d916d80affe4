"""Custom exception classes for statement aggregation.

Four error kinds exist and callers match on the exception class (or on
``kind``) to decide what to do:

- ConfigurationError: missing or malformed billing configuration (fatal)
- DateParseError: unparseable date on an ingested record (recoverable per item
  for ledger transactions only)
- ValidationError: money that does not resolve to whole centavos (fatal)
- PenaltyCalculationError: penalty engine could not complete (fatal)
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error kinds raised by the statement core."""

    CONFIGURATION = "configuration"
    DATE_PARSE = "date_parse"
    VALIDATION = "validation"
    PENALTY_CALCULATION = "penalty_calculation"


class StatementError(Exception):
    """Base exception for statement aggregation errors.

    Carries the client/unit/period the error was raised for so callers can log
    or display it without parsing the message.
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        client_id: str | None = None,
        unit_id: str | None = None,
        period: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.client_id = client_id
        self.unit_id = unit_id
        self.period = period

    @property
    def context(self) -> dict[str, str]:
        """Non-empty context fields, for structured logging."""
        fields = {"client_id": self.client_id, "unit_id": self.unit_id, "period": self.period}
        return {key: value for key, value in fields.items() if value is not None}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ConfigurationError(StatementError):
    """Billing or fiscal configuration missing or invalid."""

    kind = ErrorKind.CONFIGURATION


class DateParseError(StatementError):
    """A date on an ingested record could not be parsed."""

    kind = ErrorKind.DATE_PARSE


class ValidationError(StatementError):
    """Monetary value does not resolve to an integer number of centavos."""

    kind = ErrorKind.VALIDATION


class PenaltyCalculationError(StatementError):
    """Penalty engine could not complete for the given inputs."""

    kind = ErrorKind.PENALTY_CALCULATION


__all__ = [
    "ErrorKind",
    "StatementError",
    "ConfigurationError",
    "DateParseError",
    "ValidationError",
    "PenaltyCalculationError",
]
