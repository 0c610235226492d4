# app.py: membership application wizard (Streamlit entrypoint)
from __future__ import annotations

import sys
from pathlib import Path
from typing import Final

import streamlit as st

APP_ROOT = Path(__file__).resolve().parent
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from components.conversation_replay import render_conversation_replay  # noqa: E402
from config import SETTINGS  # noqa: E402
from constants.keys import StateKeys, UIKeys  # noqa: E402
from core.errors import TransientSubmissionError  # noqa: E402
from utils.logging_context import configure_logging, log_context  # noqa: E402
from utils.telemetry import setup_tracing  # noqa: E402
from wizard.controller import WizardController  # noqa: E402
from wizard.gateway import RetryingSubmissionGateway, SimulatedSubmissionGateway  # noqa: E402
from wizard.layout import render_step, render_submission_outcome  # noqa: E402
from wizard.navigation import (  # noqa: E402
    build_navigation_state,
    close_hosted_wizard,
    get_hosted_wizard,
    open_hosted_wizard,
    render_navigation,
    render_progress,
    run_submission,
)

configure_logging(level=SETTINGS.log_level)
setup_tracing(SETTINGS)

WIZARD_ID: Final[str] = "membership"

st.set_page_config(page_title="Membership Application", layout="centered")


def _build_gateway() -> RetryingSubmissionGateway:
    fail_with = None
    if st.session_state.get("simulate_outage"):
        fail_with = TransientSubmissionError("The membership service is temporarily unavailable.")
    inner = SimulatedSubmissionGateway(SETTINGS.simulated_latency, fail_with=fail_with)
    return RetryingSubmissionGateway(inner, max_tries=SETTINGS.submit_max_tries)


def _render_sidebar() -> None:
    with st.sidebar:
        st.header("Options")
        st.toggle("Simulate service outage", key="simulate_outage")
        st.toggle("Show error details", key=StateKeys.SHOW_ERROR_DETAILS)
        outcome = st.session_state.get(StateKeys.LAST_OUTCOME)
        if outcome:
            st.caption(f"Last session {outcome['session_id']}: {outcome['state']}")


def _render_wizard(controller: WizardController) -> None:
    with log_context(session_id=controller.session.session_id, wizard_step=controller.step.key):
        header, close_col = st.columns((5, 1))
        with header:
            render_progress(controller)
        close_col.button(
            "Close",
            key=UIKeys.CLOSE_WIZARD_BUTTON,
            on_click=close_hosted_wizard,
            args=(WIZARD_ID,),
        )

        render_step(controller)
        outcome_slot = st.empty()
        with outcome_slot.container():
            render_submission_outcome(controller)

        def _redraw(_session: object) -> None:
            with outcome_slot.container():
                render_submission_outcome(controller)

        if render_navigation(controller, build_navigation_state(controller)):
            remove = controller.add_listener(_redraw)
            try:
                run_submission(controller)
            finally:
                remove()
            st.rerun()


def main() -> None:
    st.title("Private Membership")
    _render_sidebar()

    controller = get_hosted_wizard(WIZARD_ID)
    if controller is None:
        st.write("Apply for membership to access our concierge, travel and investment network.")
        if st.button("Apply for Membership", key=UIKeys.OPEN_WIZARD_BUTTON, type="primary"):
            open_hosted_wizard(WIZARD_ID, _build_gateway())
            st.rerun()
    else:
        _render_wizard(controller)

    st.divider()
    st.subheader("A day with your concierge")
    if st.button("Play conversation", key=UIKeys.REPLAY_BUTTON):
        st.session_state[StateKeys.REPLAY_PLAYED] = True
        render_conversation_replay()


main()
