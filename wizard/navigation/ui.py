"""Streamlit rendering for wizard navigation controls."""

from __future__ import annotations

from typing import Callable, Literal

import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from wizard.controller import WizardController
from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.state import NavigationButtonState, NavigationDirection, NavigationState


def _button_key(keys: WizardSessionKeys, state: NavigationState, direction: NavigationDirection) -> str:
    return keys.namespace(f"nav:{direction.value}:{state.current_key}")


def _render_navigation_button(
    column: DeltaGenerator,
    button: NavigationButtonState | None,
    *,
    key: str,
    on_click: Callable[[], object] | None = None,
) -> bool:
    """Render a single navigation button if configured."""

    if button is None:
        column.write("")
        return False

    button_type: Literal["primary", "secondary"] = "primary" if button.primary else "secondary"
    return column.button(
        button.label,
        key=key,
        type=button_type,
        disabled=not button.enabled,
        on_click=on_click,
        use_container_width=True,
    )


def render_navigation(controller: WizardController, state: NavigationState) -> bool:
    """Render Back/Continue/Submit for ``state``.

    Back and Continue act through ``on_click`` callbacks so the next rerun
    already shows the target step. Submission is asynchronous, so the submit
    button only reports whether it was pressed.

    Returns:
        ``True`` when the submit button was pressed on this run.
    """

    keys = WizardSessionKeys(controller.session.session_id)
    cols = st.columns((1, 1), gap="small")
    _render_navigation_button(
        cols[0],
        state.previous,
        key=_button_key(keys, state, NavigationDirection.PREVIOUS),
        on_click=controller.retreat,
    )
    if state.submit is not None:
        submitted = _render_navigation_button(
            cols[1],
            state.submit,
            key=_button_key(keys, state, NavigationDirection.SUBMIT),
        )
    else:
        submitted = False
        _render_navigation_button(
            cols[1],
            state.next,
            key=_button_key(keys, state, NavigationDirection.NEXT),
            on_click=controller.advance,
        )

    hint = state.next.hint if state.next is not None else None
    if hint:
        st.caption(hint)
    return submitted


def render_progress(controller: WizardController) -> None:
    progress = controller.progress
    st.caption(f"{progress.label} · {progress.percent}%")
    st.progress(progress.percent)


__all__ = ["render_navigation", "render_progress"]
