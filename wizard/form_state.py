"""Accumulated answers for one wizard session."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from core.errors import FieldKindError, UnknownFieldError
from wizard.step_registry import MEMBERSHIP_STEPS, FieldSpec, StepDefinition, field_catalog

logger = logging.getLogger(__name__)

FieldValue = str | frozenset[str]


class FieldStore:
    """Form state keyed by field name.

    Every field declared by the step catalog is present from the start with an
    empty default, and fields are only ever overwritten or toggled, never
    removed. Scalar fields hold text (choice fields hold the option value),
    set fields hold a ``frozenset`` so callers cannot mutate them in place.

    The store does not validate values on write; gating happens in
    :mod:`wizard.validation`. While locked (a submission is in flight or the
    session reached its terminal state) writes are rejected.
    """

    def __init__(self, steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> None:
        self._specs: dict[str, FieldSpec] = field_catalog(steps)
        self._values: dict[str, FieldValue] = {name: spec.empty_value() for name, spec in self._specs.items()}
        self._view = MappingProxyType(self._values)
        self._dirty = False
        self._revision = 0
        self._locked = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def locked(self) -> bool:
        return self._locked

    def spec(self, field: str) -> FieldSpec:
        try:
            return self._specs[field]
        except KeyError:
            raise UnknownFieldError(field) from None

    def get(self, field: str) -> FieldValue:
        self.spec(field)
        return self._values[field]

    def values(self) -> Mapping[str, FieldValue]:
        """Return a live, read-only view of all field values."""

        return self._view

    def snapshot(self) -> dict[str, FieldValue]:
        """Return a detached copy of the current values."""

        return dict(self._values)

    def set_scalar(self, field: str, value: str) -> bool:
        """Overwrite ``field`` with ``value``.

        Only a write that changes the stored value marks the store dirty.

        Returns:
            ``True`` when the value was written, ``False`` while the store is
            locked.

        Raises:
            UnknownFieldError: ``field`` is not declared.
            FieldKindError: ``field`` holds a set of options.
        """

        spec = self.spec(field)
        if spec.kind.is_set:
            raise FieldKindError(f"Field '{field}' is a multi-select; use toggle_in_set()")
        if self._locked:
            logger.debug("Ignoring write to '%s' while the form is locked", field)
            return False
        text = "" if value is None else str(value)
        if self._values[field] != text:
            self._values[field] = text
            self._touch()
        return True

    def toggle_in_set(self, field: str, value: str) -> bool:
        """Remove ``value`` from the set ``field`` when present, add it otherwise."""

        spec = self.spec(field)
        if not spec.kind.is_set:
            raise FieldKindError(f"Field '{field}' is not a multi-select; use set_scalar()")
        if self._locked:
            logger.debug("Ignoring toggle on '%s' while the form is locked", field)
            return False
        current = self._values[field]
        assert isinstance(current, frozenset)
        self._values[field] = current - {value} if value in current else current | {value}
        self._touch()
        return True

    def mark_clean(self) -> None:
        self._dirty = False

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _touch(self) -> None:
        self._dirty = True
        self._revision += 1


__all__ = ["FieldStore", "FieldValue"]
