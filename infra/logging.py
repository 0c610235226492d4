"""Structured audit logging for membership submissions."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict

LOGGER = logging.getLogger("membership.audit")

_PII_FIELDS: frozenset[str] = frozenset({"email", "phone", "first_name", "last_name", "referral_source"})


def _redact(value: str) -> str:
    """Mask all but the first and last character of ``value``."""

    if len(value) <= 2:
        return "*" * len(value)
    return f"{value[0]}{'*' * (len(value) - 2)}{value[-1]}"


def redact_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a JSON-friendly copy of ``payload`` with personal fields masked."""

    safe: Dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, (set, frozenset)):
            safe[key] = sorted(str(item) for item in value)
        elif key in _PII_FIELDS and isinstance(value, str) and value:
            safe[key] = _redact(value)
        else:
            safe[key] = value
    return safe


def log_event(
    level: str,
    event: str,
    *,
    session_id: str | None = None,
    attempt: int | None = None,
    duration: float | None = None,
    outcome: str | None = None,
    payload: Mapping[str, Any] | None = None,
) -> Dict[str, Any]:
    """Emit a structured log line for a submission lifecycle event.

    Args:
        level: Logging level name (e.g., ``"info"``).
        event: Short event name such as ``"submission.started"``.
        session_id: Wizard session identifier.
        attempt: Submission attempt counter within the session.
        duration: Duration of the operation in seconds.
        outcome: ``"succeeded"``, ``"failed"`` and similar markers.
        payload: Optional application payload; personal fields are redacted.

    Returns:
        The record that was logged.
    """

    record: Dict[str, Any] = {
        "event": event,
        "session_id": session_id,
        "attempt": attempt,
        "duration": round(duration, 3) if duration is not None else None,
        "outcome": outcome,
    }
    safe_record = {k: v for k, v in record.items() if v is not None}
    if payload is not None:
        safe_record["payload"] = redact_payload(payload)
    LOGGER.log(getattr(logging, level.upper(), logging.INFO), json.dumps(safe_record, sort_keys=True))
    return safe_record


__all__ = ["log_event", "redact_payload"]
