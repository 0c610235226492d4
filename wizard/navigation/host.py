"""Keep wizard controllers alive across Streamlit reruns.

Streamlit re-executes the script on every interaction, so each open wizard's
controller is parked in ``st.session_state`` under its own id. Widget keys are
namespaced by the session id, which guarantees that a reopened wizard starts
from empty widgets instead of inheriting the previous session's input.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, MutableMapping

import streamlit as st

from config import SETTINGS, WizardSettings
from constants.keys import StateKeys
from wizard.controller import WizardController, open_wizard
from wizard.gateway import SubmissionGateway
from wizard.navigation.keys import WizardSessionKeys
from wizard.session import SubmissionState

logger = logging.getLogger(__name__)


def _registry() -> MutableMapping[str, WizardController]:
    registry = st.session_state.get(StateKeys.OPEN_WIZARDS)
    if not isinstance(registry, dict):
        registry = {}
        st.session_state[StateKeys.OPEN_WIZARDS] = registry
    return registry


def _drop_widget_state(session_id: str) -> int:
    prefix = WizardSessionKeys(session_id).prefix
    stale = [key for key in list(st.session_state.keys()) if isinstance(key, str) and key.startswith(prefix)]
    for key in stale:
        del st.session_state[key]
    return len(stale)


def get_hosted_wizard(wizard_id: str) -> WizardController | None:
    return _registry().get(wizard_id)


def open_hosted_wizard(
    wizard_id: str,
    gateway: SubmissionGateway,
    *,
    settings: WizardSettings = SETTINGS,
) -> WizardController:
    """Open a new wizard under ``wizard_id``, replacing any existing one."""

    close_hosted_wizard(wizard_id)
    controller: WizardController | None = None

    def _on_close() -> None:
        registry = _registry()
        if controller is not None and registry.get(wizard_id) is controller:
            registry.pop(wizard_id, None)
            outcome: dict[str, Any] = {
                "wizard_id": wizard_id,
                "session_id": controller.session.session_id,
                "state": str(controller.submission_state),
            }
            st.session_state[StateKeys.LAST_OUTCOME] = outcome
            _drop_widget_state(controller.session.session_id)

    controller = open_wizard(gateway, settings=settings, on_close=_on_close)
    _registry()[wizard_id] = controller
    return controller


def close_hosted_wizard(wizard_id: str) -> bool:
    controller = _registry().get(wizard_id)
    if controller is None:
        return False
    return controller.close()


def run_submission(controller: WizardController) -> bool:
    """Submit and, on success, keep the loop alive until the wizard dismisses itself.

    The teardown timer lives on the event loop that ran the submission, so the
    success view stays on screen for the dismiss delay before ``close`` fires.
    """

    async def _submit_and_dismiss() -> bool:
        accepted = await controller.submit()
        if accepted and controller.submission_state is SubmissionState.SUCCEEDED:
            await controller.wait_closed()
        return accepted

    return asyncio.run(_submit_and_dismiss())


__all__ = [
    "close_hosted_wizard",
    "get_hosted_wizard",
    "open_hosted_wizard",
    "run_submission",
]
