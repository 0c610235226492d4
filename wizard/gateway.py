"""Submission gateways consumed by the wizard controller.

A gateway receives an immutable :class:`~models.membership.MembershipApplication`.
Returning normally means the application was accepted; raising
:class:`~core.errors.SubmissionError` (or any other exception) means it was
not. :class:`~core.errors.TransientSubmissionError` marks failures that are
worth retrying automatically.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, runtime_checkable

import backoff

from core.errors import SubmissionError
from infra.logging import log_event
from models.membership import MembershipApplication
from utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)


@runtime_checkable
class SubmissionGateway(Protocol):
    """Destination for completed membership applications."""

    async def submit(self, application: MembershipApplication) -> None: ...


class LoggingSubmissionGateway:
    """Accept every application and write a redacted audit line for it."""

    def __init__(self) -> None:
        self.received: list[MembershipApplication] = []

    async def submit(self, application: MembershipApplication) -> None:
        self.received.append(application)
        log_event("info", "application.received", outcome="accepted", payload=application.model_dump())


class SimulatedSubmissionGateway(LoggingSubmissionGateway):
    """Stand-in for a remote intake service with fixed network latency.

    ``fail_with`` makes every call raise the given error after the delay,
    which lets the host demonstrate the failure and retry path.
    """

    def __init__(self, latency: float = 2.0, *, fail_with: SubmissionError | None = None) -> None:
        super().__init__()
        self.latency = latency
        self.fail_with = fail_with

    async def submit(self, application: MembershipApplication) -> None:
        await asyncio.sleep(self.latency)
        if self.fail_with is not None:
            raise self.fail_with
        await super().submit(application)


class RetryingSubmissionGateway:
    """Retry transient failures of ``inner`` with exponential backoff."""

    def __init__(
        self,
        inner: SubmissionGateway,
        *,
        max_tries: int = 3,
        factor: float = 0.5,
        jitter: Any = backoff.full_jitter,
    ) -> None:
        self.inner = inner
        self.max_tries = max_tries
        self._submit = retry_with_backoff(
            max_tries=max_tries,
            factor=factor,
            jitter=jitter,
            logger=logger,
        )(inner.submit)

    async def submit(self, application: MembershipApplication) -> None:
        await self._submit(application)


__all__ = [
    "LoggingSubmissionGateway",
    "RetryingSubmissionGateway",
    "SimulatedSubmissionGateway",
    "SubmissionGateway",
]
