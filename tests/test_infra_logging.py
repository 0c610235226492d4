from __future__ import annotations

import json
import logging

from infra.logging import log_event, redact_payload


def test_redact_payload_masks_personal_fields() -> None:
    safe = redact_payload(
        {
            "first_name": "Ada",
            "email": "ada@example.com",
            "phone": "12",
            "primary_residence": "London",
            "luxury_interests": frozenset({"Superyachts", "Fine Dining"}),
            "referral_source": "",
        }
    )

    assert safe["first_name"] == "A*a"
    assert safe["email"] == "a*************m"
    assert safe["phone"] == "**"
    assert safe["primary_residence"] == "London"
    assert safe["luxury_interests"] == ["Fine Dining", "Superyachts"]
    assert safe["referral_source"] == ""


def test_log_event_emits_sorted_json(caplog) -> None:
    caplog.set_level(logging.INFO, logger="membership.audit")

    record = log_event(
        "info",
        "submission.succeeded",
        session_id="abc",
        attempt=2,
        duration=0.123456,
        outcome="succeeded",
    )

    assert record == {
        "attempt": 2,
        "duration": 0.123,
        "event": "submission.succeeded",
        "outcome": "succeeded",
        "session_id": "abc",
    }
    assert json.loads(caplog.records[-1].message) == record


def test_log_event_level_and_omitted_fields(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="membership.audit")

    record = log_event("warning", "submission.failed", payload={"last_name": "Lovelace"})

    assert record == {"event": "submission.failed", "payload": {"last_name": "L******e"}}
    assert caplog.records[-1].levelno == logging.WARNING
