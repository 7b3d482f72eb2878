"""Exception hierarchy for the agreement package.

Every error carries a human readable ``message`` plus a ``details`` mapping
with the offending quantities, so batch callers can log them without parsing
strings.
"""

from __future__ import annotations

from typing import Any


class AgreementError(Exception):
    """Base class for all agreement computation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LengthMismatchError(AgreementError):
    """Observed and predicted sequences differ in length."""


class InsufficientDataError(AgreementError):
    """Fewer than two paired points were supplied."""


class DegenerateInputError(AgreementError):
    """A formula would divide by a zero standard deviation or covariance."""


class MissingValueError(AgreementError, ValueError):
    """Observed or predicted values contain NaN or infinite entries."""
