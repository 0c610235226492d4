"""Membership application wizard: step catalog, form state and controller."""

from __future__ import annotations

from .controller import TEARDOWN_TIMER, WizardController, WizardProgress, open_wizard
from .form_state import FieldStore, FieldValue
from .gateway import (
    LoggingSubmissionGateway,
    RetryingSubmissionGateway,
    SimulatedSubmissionGateway,
    SubmissionGateway,
)
from .session import SubmissionState, WizardSession
from .step_registry import (
    MEMBERSHIP_STEPS,
    FieldKind,
    FieldOption,
    FieldSpec,
    StepDefinition,
    StepKind,
    VisibilityRule,
    get_step,
    step_keys,
)
from .timers import TimerRegistry
from .validation import can_advance, missing_required_fields

__all__ = [
    "FieldKind",
    "FieldOption",
    "FieldSpec",
    "FieldStore",
    "FieldValue",
    "LoggingSubmissionGateway",
    "MEMBERSHIP_STEPS",
    "RetryingSubmissionGateway",
    "SimulatedSubmissionGateway",
    "StepDefinition",
    "StepKind",
    "SubmissionGateway",
    "SubmissionState",
    "TEARDOWN_TIMER",
    "TimerRegistry",
    "VisibilityRule",
    "WizardController",
    "WizardProgress",
    "WizardSession",
    "can_advance",
    "get_step",
    "missing_required_fields",
    "open_wizard",
    "step_keys",
]
