"""Behavioural tests for navigation, submission and teardown of a wizard."""

from __future__ import annotations

import asyncio
import logging

import pytest

from config import WizardSettings
from core.errors import PAYLOAD_INVALID_MESSAGE, SUBMISSION_FAILED_MESSAGE, SubmissionError
from wizard.controller import TEARDOWN_TIMER, WizardController, open_wizard
from wizard.gateway import LoggingSubmissionGateway
from wizard.session import SubmissionState, WizardSession
from wizard.timers import TimerRegistry

from tests.utils import (
    COMPANY_STEPS,
    FlakyGateway,
    HeldGateway,
    RecordingGateway,
    RejectingGateway,
    fill_membership_form,
    walk_to_review,
)


def test_new_wizard_starts_at_welcome(controller: WizardController) -> None:
    assert controller.current_step == 0
    assert controller.step.key == "welcome"
    assert controller.submission_state is SubmissionState.IDLE
    assert controller.progress.label == "Step 1 of 8"
    assert controller.progress.percent == 13


def test_welcome_continue_is_always_enabled(controller: WizardController) -> None:
    assert controller.can_advance is True
    assert controller.advance() is True
    assert controller.step.key == "personal"


def test_retreat_at_first_step_is_a_noop(controller: WizardController) -> None:
    assert controller.can_retreat is False
    assert controller.retreat() is False
    assert controller.current_step == 0


def test_advance_blocked_until_required_fields_answered(controller: WizardController) -> None:
    controller.advance()
    controller.set_field("first_name", "Ada")
    controller.set_field("last_name", "Lovelace")
    controller.set_field("email", "ada@example.com")

    assert controller.can_advance is False
    assert controller.advance() is False
    assert controller.current_step == 1
    assert controller.missing_fields() == ["phone"]

    controller.set_field("phone", "+44 20 7946 0000")
    assert controller.advance() is True
    assert controller.step.key == "location"


def test_personal_details_unlock_location_step(controller: WizardController) -> None:
    controller.advance()
    assert controller.can_advance is False

    controller.set_field("first_name", "John")
    controller.set_field("last_name", "Smith")
    controller.set_field("email", "john@x.com")
    controller.set_field("phone", "555-1234")

    assert controller.can_advance is True
    assert controller.advance() is True
    assert controller.current_step == 2


def test_deselecting_last_interest_blocks_investments_step(controller: WizardController) -> None:
    fill_membership_form(controller)
    controller.toggle_option("investment_interests", "Private Equity")
    while controller.step.key != "investments":
        controller.advance()

    controller.toggle_option("investment_interests", "Private Equity")
    assert controller.can_advance is True
    controller.toggle_option("investment_interests", "Private Equity")

    assert controller.session.form.get("investment_interests") == frozenset()
    assert controller.can_advance is False


def test_step_index_stays_in_range(controller: WizardController) -> None:
    walk_to_review(controller)

    assert controller.is_last_step
    assert controller.can_advance is False
    assert controller.advance() is False
    assert controller.current_step == controller.session.last_step
    assert controller.progress.percent == 100

    for _ in range(20):
        controller.retreat()
    assert controller.current_step == 0


def test_answers_survive_navigation(controller: WizardController) -> None:
    controller.advance()
    controller.set_field("first_name", "Ada")
    controller.advance()
    controller.retreat()

    assert controller.session.form.get("first_name") == "Ada"


def test_toggle_option_notifies_listeners(controller: WizardController) -> None:
    seen: list[int] = []
    remove = controller.add_listener(lambda session: seen.append(session.form.revision))

    controller.toggle_option("investment_interests", "Real Estate")
    remove()
    controller.toggle_option("investment_interests", "Real Estate")

    assert seen == [1]
    assert controller.session.form.get("investment_interests") == frozenset()


def test_referral_source_appears_for_referrals(controller: WizardController) -> None:
    fill_membership_form(controller)
    while controller.step.key != "goals":
        controller.advance()

    assert [spec.name for spec in controller.visible_fields()] == ["heard_about_us"]
    controller.set_field("heard_about_us", "referral")
    assert [spec.name for spec in controller.visible_fields()] == ["heard_about_us", "referral_source"]


def test_submit_only_on_last_step(controller: WizardController) -> None:
    fill_membership_form(controller)

    assert controller.can_submit is False
    assert asyncio.run(controller.submit()) is False
    assert controller.submission_state is SubmissionState.IDLE


@pytest.mark.asyncio
async def test_successful_submission_then_auto_close(
    accepting_gateway: LoggingSubmissionGateway, fast_settings: WizardSettings
) -> None:
    closed: list[bool] = []
    controller = open_wizard(accepting_gateway, settings=fast_settings, on_close=lambda: closed.append(True))
    walk_to_review(controller)

    assert await controller.submit() is True

    assert controller.submission_state is SubmissionState.SUCCEEDED
    assert TEARDOWN_TIMER in controller.timers
    assert controller.can_submit is False
    assert controller.can_retreat is False
    application = accepting_gateway.received[0]
    assert application.full_name == "Ada Lovelace"
    assert application.investment_interests == frozenset({"Private Equity"})

    await asyncio.wait_for(controller.wait_closed(), timeout=1.0)
    assert controller.closed is True
    assert closed == [True]
    assert len(controller.timers) == 0


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_ignored(fast_settings: WizardSettings) -> None:
    gateway = HeldGateway()
    controller = WizardController(WizardSession.open(), gateway=gateway, settings=fast_settings)
    walk_to_review(controller)

    first = asyncio.create_task(controller.submit())
    await gateway.entered.wait()

    assert controller.submission_state is SubmissionState.SUBMITTING
    assert controller.can_submit is False
    assert await controller.submit() is False
    assert controller.retreat() is False
    assert controller.set_field("first_name", "Grace") is False

    gateway.release.set()
    assert await first is True
    assert len(gateway.calls) == 1
    assert controller.session.attempts == 1
    controller.close()


@pytest.mark.asyncio
async def test_rejected_submission_can_be_retried(fast_settings: WizardSettings) -> None:
    gateway = FlakyGateway(SubmissionError("Intake is closed for today."))
    controller = WizardController(WizardSession.open(), gateway=gateway, settings=fast_settings)
    walk_to_review(controller)

    assert await controller.submit() is False
    assert controller.submission_state is SubmissionState.FAILED
    assert controller.failure_reason == "Intake is closed for today."
    assert controller.session.form.locked is False
    assert controller.can_submit is True

    assert await controller.retry() is True
    assert controller.submission_state is SubmissionState.SUCCEEDED
    assert controller.session.attempts == 2
    controller.close()


@pytest.mark.asyncio
async def test_unexpected_gateway_errors_use_generic_message(
    fast_settings: WizardSettings, caplog: pytest.LogCaptureFixture
) -> None:
    gateway = FlakyGateway(RuntimeError("socket closed"))
    controller = WizardController(WizardSession.open(), gateway=gateway, settings=fast_settings)
    walk_to_review(controller)

    with caplog.at_level(logging.WARNING):
        assert await controller.submit() is False

    assert controller.failure_reason == SUBMISSION_FAILED_MESSAGE
    assert "Submission gateway raised unexpectedly" in caplog.text


@pytest.mark.asyncio
async def test_submission_timeout_fails_the_attempt() -> None:
    gateway = HeldGateway()
    settings = WizardSettings(dismiss_delay=0.01, submit_timeout=0.05)
    controller = WizardController(WizardSession.open(), gateway=gateway, settings=settings)
    walk_to_review(controller)

    assert await controller.submit() is False

    assert controller.submission_state is SubmissionState.FAILED
    assert controller.failure_reason == "The submission timed out after 0.05 seconds."


@pytest.mark.asyncio
async def test_retreat_after_failure_returns_to_idle(fast_settings: WizardSettings) -> None:
    controller = WizardController(WizardSession.open(), gateway=RejectingGateway(), settings=fast_settings)
    walk_to_review(controller)
    await controller.submit()

    assert controller.retreat() is True
    assert controller.submission_state is SubmissionState.IDLE
    assert controller.failure_reason is None
    assert await controller.retry() is False


@pytest.mark.asyncio
async def test_close_cancels_pending_teardown(
    accepting_gateway: LoggingSubmissionGateway,
) -> None:
    settings = WizardSettings(dismiss_delay=0.05)
    closes: list[int] = []
    controller = open_wizard(accepting_gateway, settings=settings, on_close=lambda: closes.append(1))
    walk_to_review(controller)
    await controller.submit()

    assert controller.close() is True
    assert controller.close() is False
    await asyncio.sleep(0.1)

    assert closes == [1]
    assert len(controller.timers) == 0


@pytest.mark.asyncio
async def test_close_while_submitting_discards_result(fast_settings: WizardSettings) -> None:
    gateway = HeldGateway()
    controller = WizardController(WizardSession.open(), gateway=gateway, settings=fast_settings)
    walk_to_review(controller)

    pending = asyncio.create_task(controller.submit())
    await gateway.entered.wait()
    controller.close()
    gateway.release.set()

    assert await pending is False
    assert controller.submission_state is SubmissionState.SUBMITTING
    assert TEARDOWN_TIMER not in controller.timers


def test_closed_wizard_ignores_input(controller: WizardController) -> None:
    controller.close()

    assert controller.set_field("first_name", "Ada") is False
    assert controller.toggle_option("luxury_interests", "Superyachts") is False
    assert controller.advance() is False
    assert controller.session.form.get("first_name") == ""


def test_reopening_gives_fresh_state(accepting_gateway: LoggingSubmissionGateway) -> None:
    first = open_wizard(accepting_gateway)
    fill_membership_form(first)
    first.advance()
    first.close()

    second = open_wizard(accepting_gateway)

    assert second.current_step == 0
    assert second.session.session_id != first.session.session_id
    assert second.session.form.get("first_name") == ""
    assert second.session.form.get("investment_interests") == frozenset()


def test_setting_an_unchanged_value_does_not_notify(controller: WizardController) -> None:
    seen: list[int] = []
    controller.add_listener(lambda session: seen.append(session.form.revision))

    assert controller.set_field("first_name", "Ada") is True
    assert controller.set_field("first_name", "Ada") is True

    assert seen == [1]
    assert controller.session.form.dirty is False


def test_injected_empty_timer_registry_is_kept(
    accepting_gateway: LoggingSubmissionGateway, fast_settings: WizardSettings
) -> None:
    timers = TimerRegistry()

    controller = WizardController(
        WizardSession.open(), gateway=accepting_gateway, settings=fast_settings, timers=timers
    )

    assert controller.timers is timers
    assert open_wizard(accepting_gateway, timers=timers).timers is timers


@pytest.mark.asyncio
async def test_host_registry_can_cancel_the_teardown(
    accepting_gateway: LoggingSubmissionGateway, fast_settings: WizardSettings
) -> None:
    timers = TimerRegistry()
    controller = open_wizard(accepting_gateway, settings=fast_settings, timers=timers)
    walk_to_review(controller)

    assert await controller.submit() is True
    assert TEARDOWN_TIMER in timers
    assert timers.cancel_all() == 1
    await asyncio.sleep(0.05)

    assert controller.closed is False


@pytest.mark.asyncio
async def test_custom_catalog_with_default_payload_fails_cleanly(fast_settings: WizardSettings) -> None:
    gateway = RecordingGateway()
    controller = open_wizard(gateway, steps=COMPANY_STEPS, settings=fast_settings)
    controller.advance()
    controller.set_field("company", "Acme")
    assert controller.advance() is True

    assert await controller.submit() is False

    assert controller.submission_state is SubmissionState.FAILED
    assert controller.failure_reason == PAYLOAD_INVALID_MESSAGE
    assert controller.session.form.locked is False
    assert controller.can_submit is True
    assert controller.can_retreat is True
    assert controller.set_field("company", "Acme Ltd") is True
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_custom_catalog_submits_through_payload_factory(fast_settings: WizardSettings) -> None:
    gateway = RecordingGateway()
    controller = open_wizard(gateway, steps=COMPANY_STEPS, settings=fast_settings, payload_factory=dict)
    controller.advance()
    controller.set_field("company", "Acme")
    controller.advance()

    assert await controller.submit() is True

    assert gateway.calls == [{"company": "Acme", "size": "", "offices": frozenset()}]
    controller.close()
