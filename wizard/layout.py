"""Streamlit renderers for the membership wizard steps."""

from __future__ import annotations

from typing import Callable, Final

import streamlit as st

from constants.keys import StateKeys
from models.membership import MembershipApplication
from utils.errors import display_error
from wizard.controller import WizardController
from wizard.form_state import FieldValue
from wizard.navigation.keys import WizardSessionKeys
from wizard.session import SubmissionState
from wizard.step_registry import FieldKind, FieldSpec, StepDefinition, StepKind
from wizard.validation import visible_fields

StepRenderer = Callable[[WizardController, StepDefinition], None]

_SELECTED_PREFIX: Final[str] = "✓ "
_MULTILINE_FIELDS: Final[frozenset[str]] = frozenset({"additional_residences", "preferred_destinations"})


def _field_label(spec: FieldSpec) -> str:
    return f"{spec.label} *" if spec.required else spec.label


def _sync_text(controller: WizardController, field: str, widget_key: str) -> None:
    controller.set_field(field, str(st.session_state.get(widget_key) or ""))


def _render_text_field(controller: WizardController, step: StepDefinition, spec: FieldSpec) -> None:
    key = WizardSessionKeys(controller.session.session_id).widget(step.key, spec.name)
    if key not in st.session_state:
        st.session_state[key] = controller.session.form.get(spec.name)
    widget = st.text_area if spec.name in _MULTILINE_FIELDS else st.text_input
    widget(
        _field_label(spec),
        key=key,
        placeholder=spec.placeholder or None,
        on_change=_sync_text,
        args=(controller, spec.name, key),
    )


def _render_choice_field(controller: WizardController, step: StepDefinition, spec: FieldSpec) -> None:
    key = WizardSessionKeys(controller.session.session_id).widget(step.key, spec.name)
    labels = {option.value: option.label for option in spec.options}
    choices = ["", *spec.option_values()]
    if key not in st.session_state:
        current = controller.session.form.get(spec.name)
        st.session_state[key] = current if current in choices else ""
    st.selectbox(
        _field_label(spec),
        choices,
        key=key,
        format_func=lambda value: labels.get(value, "Select...") if value else "Select...",
        on_change=_sync_text,
        args=(controller, spec.name, key),
    )


def _render_multi_field(controller: WizardController, step: StepDefinition, spec: FieldSpec) -> None:
    keys = WizardSessionKeys(controller.session.session_id)
    selected = controller.session.form.get(spec.name)
    st.markdown(f"**{_field_label(spec)}**")
    cols = st.columns(2, gap="small")
    for index, option in enumerate(spec.options):
        chosen = option.value in selected
        cols[index % 2].button(
            f"{_SELECTED_PREFIX}{option.label}" if chosen else option.label,
            key=keys.widget(step.key, spec.name, option.value),
            type="primary" if chosen else "secondary",
            on_click=controller.toggle_option,
            args=(spec.name, option.value),
            use_container_width=True,
        )


_FIELD_RENDERERS: Final[dict[FieldKind, Callable[[WizardController, StepDefinition, FieldSpec], None]]] = {
    FieldKind.TEXT: _render_text_field,
    FieldKind.CHOICE: _render_choice_field,
    FieldKind.MULTI: _render_multi_field,
}


def _render_welcome(controller: WizardController, step: StepDefinition) -> None:
    st.markdown(
        "Membership is by invitation and application only. The next few steps "
        "take about five minutes; your answers stay private to our membership team."
    )


def _render_form(controller: WizardController, step: StepDefinition) -> None:
    for spec in controller.visible_fields():
        _FIELD_RENDERERS[spec.kind](controller, step, spec)


def _display_value(spec: FieldSpec, value: FieldValue) -> str:
    if isinstance(value, frozenset):
        return f"{len(value)} selected"
    if spec.kind is FieldKind.CHOICE:
        labels = {option.value: option.label for option in spec.options}
        return labels.get(value, value)
    return value


def review_rows(controller: WizardController) -> list[tuple[str, str]]:
    """Return the label/value rows shown on the review step.

    Membership catalogs use :meth:`MembershipApplication.summary_rows`; any
    other catalog lists its visible answers in step order.
    """

    snapshot = controller.session.form.snapshot()
    if set(snapshot) <= set(MembershipApplication.model_fields):
        return MembershipApplication.from_form_state(snapshot).summary_rows()
    rows: list[tuple[str, str]] = []
    for step in controller.steps:
        for spec in visible_fields(step, snapshot):
            rows.append((spec.label, _display_value(spec, snapshot[spec.name])))
    return rows


def _render_review(controller: WizardController, step: StepDefinition) -> None:
    with st.container(border=True):
        for label, value in review_rows(controller):
            left, right = st.columns((1, 2))
            left.markdown(f"**{label}**")
            right.write(value or "-")
    st.caption("By submitting you confirm that the information above is accurate.")


_STEP_RENDERERS: Final[dict[StepKind, StepRenderer]] = {
    StepKind.WELCOME: _render_welcome,
    StepKind.FORM: _render_form,
    StepKind.REVIEW: _render_review,
}


def render_step(controller: WizardController) -> None:
    """Render the header and body of the controller's current step."""

    step = controller.step
    st.subheader(step.title)
    if step.subtitle:
        st.caption(step.subtitle)
    _STEP_RENDERERS[step.kind](controller, step)


def render_submission_outcome(controller: WizardController) -> None:
    """Show the success or failure view for the last submission attempt."""

    state = controller.submission_state
    if state is SubmissionState.SUCCEEDED:
        st.success("Application received. Our membership team will be in touch within 48 hours.")
    elif state is SubmissionState.SUBMITTING:
        st.info("Submitting your application...")
    elif state is SubmissionState.FAILED:
        display_error(
            controller.failure_reason or "The submission failed.",
            detail=f"Attempts so far: {controller.session.attempts}",
            show_detail=bool(st.session_state.get(StateKeys.SHOW_ERROR_DETAILS, False)),
        )


__all__ = ["render_step", "render_submission_outcome", "review_rows"]
