"""Per-instance state of an open membership wizard."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum

from wizard.form_state import FieldStore
from wizard.step_registry import MEMBERSHIP_STEPS, StepDefinition, check_catalog


class SubmissionState(StrEnum):
    """Where the session is in the submit lifecycle."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class WizardSession:
    """State owned by exactly one open wizard.

    Nothing here is shared between wizards; each call to :meth:`open` builds
    a fresh form store with every field at its empty default.
    """

    steps: tuple[StepDefinition, ...]
    form: FieldStore
    session_id: str = field(default_factory=_new_session_id)
    current_step: int = 0
    submission_state: SubmissionState = SubmissionState.IDLE
    failure_reason: str | None = None
    attempts: int = 0
    closed: bool = False

    @classmethod
    def open(cls, steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> "WizardSession":
        check_catalog(steps)
        return cls(steps=steps, form=FieldStore(steps))

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def last_step(self) -> int:
        return len(self.steps) - 1

    @property
    def step(self) -> StepDefinition:
        return self.steps[self.current_step]


__all__ = ["SubmissionState", "WizardSession"]
