"""Pydantic model for a submitted membership application."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MembershipApplication(BaseModel):
    """Immutable snapshot of the answers handed to a submission gateway."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    primary_residence: str = ""
    additional_residences: str = ""
    net_worth: str = ""
    investment_interests: frozenset[str] = Field(default_factory=frozenset)
    luxury_interests: frozenset[str] = Field(default_factory=frozenset)
    travel_frequency: str = ""
    preferred_destinations: str = ""
    heard_about_us: str = ""
    referral_source: str = ""

    @field_validator("investment_interests", "luxury_interests", mode="before")
    @classmethod
    def _coerce_selection(cls, value: object) -> object:
        """Accept any iterable of option labels for multi-select answers."""

        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set)):
            return frozenset(value)
        return value

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name.strip(), self.last_name.strip()) if part)

    @classmethod
    def from_form_state(cls, values: Mapping[str, Any]) -> "MembershipApplication":
        """Build an application from a form-state mapping."""

        return cls.model_validate(dict(values))

    def summary_rows(self) -> list[tuple[str, str]]:
        """Return the label/value rows shown on the review step."""

        return [
            ("Name", self.full_name),
            ("Email", self.email),
            ("Location", self.primary_residence),
            ("Investment Interests", f"{len(self.investment_interests)} selected"),
            ("Luxury Interests", f"{len(self.luxury_interests)} selected"),
        ]


__all__ = ["MembershipApplication"]
