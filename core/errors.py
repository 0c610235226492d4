"""Custom exception types for the membership wizard engine."""

from __future__ import annotations


class WizardError(Exception):
    """Base exception for wizard engine issues."""


class UnknownFieldError(WizardError, KeyError):
    """Raised when a field name is not declared by the step catalog."""

    def __init__(self, field: str) -> None:
        super().__init__(field)
        self.field = field

    def __str__(self) -> str:
        return f"Unknown wizard field: {self.field!r}"


class FieldKindError(WizardError, TypeError):
    """Raised when a scalar update targets a set field or vice versa."""


SUBMISSION_FAILED_MESSAGE = (
    "We couldn't submit your application right now. Please try again in a moment."
)

PAYLOAD_INVALID_MESSAGE = (
    "Your answers could not be prepared for submission. Please review them and try again."
)


class SubmissionError(WizardError):
    """Raised by a submission gateway when an application was not accepted."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or SUBMISSION_FAILED_MESSAGE)


class TransientSubmissionError(SubmissionError):
    """Raised for failures that are worth retrying (network blips, 5xx)."""


class PayloadError(SubmissionError):
    """Raised when the answers cannot be turned into a submission payload."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or PAYLOAD_INVALID_MESSAGE)


class SubmissionTimeoutError(SubmissionError):
    """Raised when the gateway did not answer within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"The submission timed out after {timeout:g} seconds.")
        self.timeout = timeout
