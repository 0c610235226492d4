"""Exponential backoff for submission attempts."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable, ParamSpec, TypeVar

import backoff

from core.errors import TransientSubmissionError
from infra.logging import log_event

T = TypeVar("T")
P = ParamSpec("P")

# Failures a gateway flags as worth another attempt.
SUBMISSION_RETRY_EXCEPTIONS: tuple[type[Exception], ...] = (TransientSubmissionError,)


def _log_backoff(details: dict[str, Any]) -> None:
    log_event(
        "info",
        "submission.retry_scheduled",
        attempt=details.get("tries"),
        duration=details.get("wait"),
        outcome=type(details.get("exception")).__name__,
    )


def _log_giveup(details: dict[str, Any]) -> None:
    log_event(
        "warning",
        "submission.retries_exhausted",
        attempt=details.get("tries"),
        duration=details.get("elapsed"),
        outcome=type(details.get("exception")).__name__,
    )


def retry_with_backoff(
    *,
    exceptions: Iterable[type[Exception]] = SUBMISSION_RETRY_EXCEPTIONS,
    max_tries: int = 3,
    jitter: Any = backoff.full_jitter,
    base: float = 2,
    factor: float = 0.5,
    logger: logging.Logger | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Return a decorator retrying an async callable on ``exceptions``.

    Waits grow as ``factor * base ** n`` seconds. Each scheduled retry and the
    final give-up are written to the audit log; the last exception is re-raised
    once ``max_tries`` attempts have failed.
    """

    return backoff.on_exception(
        backoff.expo,
        tuple(exceptions),
        max_tries=max_tries,
        jitter=jitter,
        on_backoff=_log_backoff,
        on_giveup=_log_giveup,
        logger=logger,
        base=base,
        factor=factor,
    )


__all__ = ["SUBMISSION_RETRY_EXCEPTIONS", "retry_with_backoff"]
