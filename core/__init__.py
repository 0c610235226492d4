"""Core package for shared membership wizard primitives."""

from .errors import (
    FieldKindError,
    PayloadError,
    SubmissionError,
    SubmissionTimeoutError,
    TransientSubmissionError,
    UnknownFieldError,
    WizardError,
)

__all__ = [
    "FieldKindError",
    "PayloadError",
    "SubmissionError",
    "SubmissionTimeoutError",
    "TransientSubmissionError",
    "UnknownFieldError",
    "WizardError",
]
