"""Navigation and submission lifecycle for one membership wizard session.

The controller is the only writer of a :class:`~wizard.session.WizardSession`.
It gates forward navigation through :mod:`wizard.validation`, hands an
immutable payload to a :class:`~wizard.gateway.SubmissionGateway`, and owns the
teardown timer that closes the wizard after a successful submission.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from opentelemetry import trace

from config import SETTINGS, WizardSettings
from core.errors import SUBMISSION_FAILED_MESSAGE, PayloadError, SubmissionError, SubmissionTimeoutError
from infra.logging import log_event
from models.membership import MembershipApplication
from utils.logging_context import log_context
from wizard.form_state import FieldValue
from wizard.gateway import SubmissionGateway
from wizard.session import SubmissionState, WizardSession
from wizard.step_registry import MEMBERSHIP_STEPS, FieldSpec, StepDefinition
from wizard.timers import TimerRegistry
from wizard.validation import can_advance, missing_required_fields, visible_fields

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

SessionListener = Callable[[WizardSession], None]
PayloadFactory = Callable[[Mapping[str, FieldValue]], Any]

TEARDOWN_TIMER = "teardown"
_BUSY_STATES = frozenset({SubmissionState.SUBMITTING, SubmissionState.SUCCEEDED})


@dataclass(frozen=True)
class WizardProgress:
    """Position of the session within the step sequence."""

    step_number: int
    step_count: int
    percent: int

    @property
    def label(self) -> str:
        return f"Step {self.step_number} of {self.step_count}"


class WizardController:
    """Drive one :class:`WizardSession` through navigation and submission.

    Operations that are not currently available (advancing past a blocked or
    final step, retreating from the first step, submitting anywhere but the
    last step or while a submission is in flight) return ``False`` and leave
    the session untouched. Hosts use the ``can_*`` properties to disable the
    matching controls.

    ``payload_factory`` turns the form snapshot into what the gateway
    receives; it must match the step catalog the session was opened with.
    """

    def __init__(
        self,
        session: WizardSession,
        *,
        gateway: SubmissionGateway,
        settings: WizardSettings = SETTINGS,
        timers: TimerRegistry | None = None,
        on_close: Callable[[], None] | None = None,
        payload_factory: PayloadFactory = MembershipApplication.from_form_state,
    ) -> None:
        self._session = session
        self._payload_factory = payload_factory
        self._gateway = gateway
        self._settings = settings
        self._timers = timers if timers is not None else TimerRegistry()
        self._on_close = on_close
        self._listeners: list[SessionListener] = []
        self._closed_event: asyncio.Event | None = None

    @property
    def session(self) -> WizardSession:
        return self._session

    @property
    def timers(self) -> TimerRegistry:
        return self._timers

    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        return self._session.steps

    @property
    def step(self) -> StepDefinition:
        return self._session.step

    @property
    def current_step(self) -> int:
        return self._session.current_step

    @property
    def submission_state(self) -> SubmissionState:
        return self._session.submission_state

    @property
    def failure_reason(self) -> str | None:
        return self._session.failure_reason

    @property
    def closed(self) -> bool:
        return self._session.closed

    @property
    def is_last_step(self) -> bool:
        return self._session.current_step == self._session.last_step

    @property
    def can_advance(self) -> bool:
        session = self._session
        if session.closed or session.submission_state in _BUSY_STATES:
            return False
        if session.current_step >= session.last_step:
            return False
        if session.current_step == 0:
            return True
        return can_advance(session.current_step, session.form.values(), session.steps)

    @property
    def can_retreat(self) -> bool:
        session = self._session
        if session.closed or session.submission_state in _BUSY_STATES:
            return False
        return session.current_step > 0

    @property
    def can_submit(self) -> bool:
        session = self._session
        if session.closed or not self.is_last_step:
            return False
        return session.submission_state in (SubmissionState.IDLE, SubmissionState.FAILED)

    @property
    def progress(self) -> WizardProgress:
        number = self._session.current_step + 1
        count = self._session.step_count
        return WizardProgress(step_number=number, step_count=count, percent=math.floor(number / count * 100 + 0.5))

    def visible_fields(self) -> tuple[FieldSpec, ...]:
        return visible_fields(self.step, self._session.form.values())

    def missing_fields(self) -> list[str]:
        return missing_required_fields(self.step, self._session.form.values())

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` after every state change; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def set_field(self, field: str, value: str) -> bool:
        """Write a scalar answer; ``False`` when the form does not accept writes."""

        if self._session.closed or not self._session.form.set_scalar(field, value):
            return False
        self._flush_form()
        return True

    def toggle_option(self, field: str, value: str) -> bool:
        if self._session.closed or not self._session.form.toggle_in_set(field, value):
            return False
        self._flush_form()
        return True

    def advance(self) -> bool:
        if not self.can_advance:
            logger.debug(
                "Advance unavailable at step '%s' (missing: %s)",
                self.step.key,
                ", ".join(self.missing_fields()) or "-",
            )
            return False
        self._move_to(self._session.current_step + 1)
        return True

    def retreat(self) -> bool:
        if not self.can_retreat:
            logger.debug("Retreat unavailable at step '%s'", self.step.key)
            return False
        if self._session.submission_state is SubmissionState.FAILED:
            self._session.submission_state = SubmissionState.IDLE
            self._session.failure_reason = None
        self._move_to(self._session.current_step - 1)
        return True

    async def submit(self) -> bool:
        """Hand the application to the gateway.

        Returns:
            ``True`` when the gateway accepted the application. ``False`` when
            submission was unavailable, failed, or the wizard was closed while
            the call was in flight.
        """

        if not self.can_submit:
            logger.debug("Submit unavailable (step=%s, state=%s)", self.step.key, self.submission_state)
            return False

        session = self._session
        session.attempts += 1
        try:
            application = self._payload_factory(session.form.snapshot())
        except Exception as exc:
            logger.warning("Could not build the submission payload for session %s", session.session_id, exc_info=exc)
            self._fail(PayloadError(), duration=0.0)
            return False

        session.submission_state = SubmissionState.SUBMITTING
        session.failure_reason = None
        session.form.lock()
        self._notify()

        error: Exception | None = None
        started = time.perf_counter()
        with log_context(session_id=session.session_id, wizard_step=self.step.key, attempt=session.attempts):
            log_event("info", "submission.started", session_id=session.session_id, attempt=session.attempts)
            with tracer.start_as_current_span("membership.submit") as span:
                span.set_attribute("membership.session_id", session.session_id)
                span.set_attribute("membership.attempt", session.attempts)
                try:
                    await asyncio.wait_for(self._gateway.submit(application), timeout=self._settings.submit_timeout)
                except TimeoutError:
                    error = SubmissionTimeoutError(self._settings.submit_timeout)
                except SubmissionError as exc:
                    error = exc
                except Exception as exc:
                    logger.warning("Submission gateway raised unexpectedly", exc_info=exc)
                    error = exc
                span.set_attribute("membership.outcome", "failed" if error else "succeeded")
            duration = time.perf_counter() - started

            if session.closed:
                logger.info("Wizard closed while submitting; discarding gateway result")
                return False
            if error is not None:
                self._fail(error, duration=duration)
                return False
            self._succeed(duration=duration)
            return True

    async def retry(self) -> bool:
        """Submit again after a failure."""

        if self._session.submission_state is not SubmissionState.FAILED:
            return False
        return await self.submit()

    def close(self) -> bool:
        """Tear the session down; idempotent.

        Cancels every pending timer (including the automatic teardown after a
        successful submission) before notifying the host.
        """

        session = self._session
        if session.closed:
            return False
        self._timers.cancel_all()
        session.closed = True
        session.form.lock()
        logger.info("Wizard session %s closed at step '%s'", session.session_id, self.step.key)
        self._notify()
        if self._closed_event is not None:
            self._closed_event.set()
        if self._on_close is not None:
            self._on_close()
        return True

    async def wait_closed(self) -> None:
        if self._session.closed:
            return
        if self._closed_event is None:
            self._closed_event = asyncio.Event()
        await self._closed_event.wait()

    def _move_to(self, index: int) -> None:
        previous = self.step.key
        self._session.current_step = index
        logger.info("Wizard moved from '%s' to '%s'", previous, self.step.key)
        self._notify()

    def _fail(self, error: Exception, *, duration: float) -> None:
        session = self._session
        reason = str(error) if isinstance(error, SubmissionError) else SUBMISSION_FAILED_MESSAGE
        session.submission_state = SubmissionState.FAILED
        session.failure_reason = reason
        session.form.unlock()
        log_event(
            "warning",
            "submission.failed",
            session_id=session.session_id,
            attempt=session.attempts,
            duration=duration,
            outcome=type(error).__name__,
        )
        self._notify()

    def _succeed(self, *, duration: float) -> None:
        session = self._session
        session.submission_state = SubmissionState.SUCCEEDED
        log_event(
            "info",
            "submission.succeeded",
            session_id=session.session_id,
            attempt=session.attempts,
            duration=duration,
            outcome="succeeded",
        )
        self._timers.schedule(self._settings.dismiss_delay, self.close, name=TEARDOWN_TIMER)
        self._notify()

    def _flush_form(self) -> None:
        # Listeners re-render only for writes that changed a value.
        form = self._session.form
        if form.dirty:
            form.mark_clean()
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)


def open_wizard(
    gateway: SubmissionGateway,
    *,
    steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS,
    settings: WizardSettings = SETTINGS,
    on_close: Callable[[], None] | None = None,
    timers: TimerRegistry | None = None,
    payload_factory: PayloadFactory = MembershipApplication.from_form_state,
) -> WizardController:
    """Start a fresh session at the first step and return its controller."""

    session = WizardSession.open(steps)
    logger.info("Opened wizard session %s", session.session_id)
    return WizardController(
        session,
        gateway=gateway,
        settings=settings,
        timers=timers,
        on_close=on_close,
        payload_factory=payload_factory,
    )


__all__ = [
    "TEARDOWN_TIMER",
    "WizardController",
    "WizardProgress",
    "open_wizard",
]
