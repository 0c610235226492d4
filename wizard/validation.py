"""Gating rules deciding whether the wizard may move past a step."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Final

from wizard.step_registry import (
    MEMBERSHIP_STEPS,
    FieldSpec,
    StepDefinition,
    StepKind,
    step_at,
)

StepGate = Callable[[StepDefinition, Mapping[str, object]], bool]


def is_value_present(value: object | None) -> bool:
    """Return ``True`` when ``value`` should count as populated.

    Whitespace-only text counts as empty.
    """

    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(is_value_present(item) for item in value)
    if isinstance(value, Mapping):
        return any(is_value_present(item) for item in value.values())
    if isinstance(value, bool):
        return value
    return True


def is_field_visible(spec: FieldSpec, form_state: Mapping[str, object]) -> bool:
    """Return ``True`` unless the field's visibility rule hides it."""

    rule = spec.visible_when
    if rule is None:
        return True
    return form_state.get(rule.field) == rule.equals


def visible_fields(step: StepDefinition, form_state: Mapping[str, object]) -> tuple[FieldSpec, ...]:
    """Return the fields of ``step`` that should currently be shown."""

    return tuple(spec for spec in step.fields if is_field_visible(spec, form_state))


def missing_required_fields(step: StepDefinition, form_state: Mapping[str, object]) -> list[str]:
    """List visible required fields of ``step`` that still lack a value."""

    return [
        spec.name
        for spec in visible_fields(step, form_state)
        if spec.required and not is_value_present(form_state.get(spec.name))
    ]


def _always_open(_step: StepDefinition, _form_state: Mapping[str, object]) -> bool:
    return True


def _required_fields_present(step: StepDefinition, form_state: Mapping[str, object]) -> bool:
    return not missing_required_fields(step, form_state)


STEP_GATES: Final[Mapping[StepKind, StepGate]] = {
    StepKind.WELCOME: _always_open,
    StepKind.FORM: _required_fields_present,
    StepKind.REVIEW: _always_open,
}


def can_advance(
    step_ordinal: int,
    form_state: Mapping[str, object],
    steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS,
) -> bool:
    """Return whether the answers in ``form_state`` satisfy step ``step_ordinal``.

    Unknown ordinals never pass. The controller separately keeps the first
    step's continue action enabled regardless of this result.
    """

    step = step_at(step_ordinal, steps)
    if step is None:
        return False
    return STEP_GATES[step.kind](step, form_state)


__all__ = [
    "STEP_GATES",
    "can_advance",
    "is_field_visible",
    "is_value_present",
    "missing_required_fields",
    "visible_fields",
]
