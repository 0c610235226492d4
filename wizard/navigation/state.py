"""Navigation button state derived from a wizard controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wizard.controller import WizardController
from wizard.session import SubmissionState


class NavigationDirection(str, Enum):
    """Direction metadata for wizard navigation controls."""

    PREVIOUS = "previous"
    NEXT = "next"
    SUBMIT = "submit"


@dataclass(frozen=True)
class NavigationButtonState:
    """Typed configuration for a single navigation button."""

    direction: NavigationDirection
    label: str
    enabled: bool = True
    primary: bool = False
    hint: str | None = None


@dataclass(frozen=True)
class NavigationState:
    """Aggregated state used to render navigation controls."""

    current_key: str
    missing_fields: tuple[str, ...] = ()
    previous: NavigationButtonState | None = None
    next: NavigationButtonState | None = None
    submit: NavigationButtonState | None = None


def build_navigation_state(controller: WizardController) -> NavigationState:
    """Describe the buttons for the controller's current step.

    The first step shows no back button and a "Get Started" action that is
    always enabled; the last step swaps "Continue" for the submit action.
    """

    step = controller.step
    missing = tuple(controller.missing_fields())

    previous_button = (
        NavigationButtonState(
            direction=NavigationDirection.PREVIOUS,
            label="Back",
            enabled=controller.can_retreat,
        )
        if controller.current_step > 0
        else None
    )

    next_button = None
    submit_button = None
    if controller.is_last_step:
        state = controller.submission_state
        if state is SubmissionState.SUBMITTING:
            label = "Submitting..."
        elif state is SubmissionState.FAILED:
            label = "Try Again"
        else:
            label = "Submit Application"
        submit_button = NavigationButtonState(
            direction=NavigationDirection.SUBMIT,
            label=label,
            enabled=controller.can_submit,
            primary=True,
        )
    else:
        hint = None
        if missing and controller.current_step > 0:
            hint = "Please complete the required fields before continuing."
        next_button = NavigationButtonState(
            direction=NavigationDirection.NEXT,
            label="Get Started" if controller.current_step == 0 else "Continue",
            enabled=controller.can_advance,
            primary=True,
            hint=hint,
        )

    return NavigationState(
        current_key=step.key,
        missing_fields=missing,
        previous=previous_button,
        next=next_button,
        submit=submit_button,
    )


__all__ = [
    "NavigationButtonState",
    "NavigationDirection",
    "NavigationState",
    "build_navigation_state",
]
