"""Typed helpers for the test-suite."""

from __future__ import annotations

import asyncio

from core.errors import SubmissionError
from models.membership import MembershipApplication
from wizard.controller import WizardController
from wizard.step_registry import FieldKind, FieldOption, FieldSpec, StepDefinition, StepKind


def fill_membership_form(controller: WizardController) -> None:
    """Answer every required field of the membership catalog."""

    controller.set_field("first_name", "Ada")
    controller.set_field("last_name", "Lovelace")
    controller.set_field("email", "ada@example.com")
    controller.set_field("phone", "+44 20 7946 0000")
    controller.set_field("primary_residence", "London")
    controller.set_field("net_worth", "10-25m")
    controller.toggle_option("investment_interests", "Private Equity")
    controller.toggle_option("luxury_interests", "Superyachts")
    controller.set_field("heard_about_us", "press")


def walk_to_review(controller: WizardController) -> None:
    """Fill the form and advance to the final step."""

    fill_membership_form(controller)
    while not controller.is_last_step:
        assert controller.advance()


class HeldGateway:
    """Gateway that blocks until the test releases it."""

    def __init__(self, error: Exception | None = None) -> None:
        self.release = asyncio.Event()
        self.entered = asyncio.Event()
        self.calls: list[MembershipApplication] = []
        self.error = error

    async def submit(self, application: MembershipApplication) -> None:
        self.calls.append(application)
        self.entered.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error


class FlakyGateway:
    """Gateway that raises ``errors`` in order before accepting."""

    def __init__(self, *errors: Exception) -> None:
        self._errors = list(errors)
        self.calls = 0

    async def submit(self, application: MembershipApplication) -> None:
        self.calls += 1
        if self._errors:
            raise self._errors.pop(0)


class RejectingGateway:
    def __init__(self, message: str | None = None) -> None:
        self.message = message

    async def submit(self, application: MembershipApplication) -> None:
        raise SubmissionError(self.message)


COMPANY_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition(key="start", title="Welcome", subtitle="", ordinal=0, kind=StepKind.WELCOME),
    StepDefinition(
        key="company",
        title="Company",
        subtitle="",
        ordinal=1,
        kind=StepKind.FORM,
        fields=(
            FieldSpec("company", "Company", required=True),
            FieldSpec(
                "size",
                "Company size",
                kind=FieldKind.CHOICE,
                options=(FieldOption("small", "1-50 people"), FieldOption("large", "50+ people")),
            ),
            FieldSpec("offices", "Offices", kind=FieldKind.MULTI, options=(FieldOption("ber", "Berlin"),)),
        ),
    ),
    StepDefinition(key="confirm", title="Confirm", subtitle="", ordinal=2, kind=StepKind.REVIEW),
)
"""Three-step catalog that shares no fields with the membership model."""


class RecordingGateway:
    """Gateway that accepts any payload and keeps it."""

    def __init__(self) -> None:
        self.calls: list[object] = []

    async def submit(self, application: object) -> None:
        self.calls.append(application)
