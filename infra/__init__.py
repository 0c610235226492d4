"""Infrastructure helpers for membership wizard deployments."""

from __future__ import annotations

from .logging import log_event, redact_payload

__all__ = ["log_event", "redact_payload"]
