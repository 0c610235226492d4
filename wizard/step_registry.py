"""Registry for membership wizard steps, their fields, and canonical order."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class StepKind(StrEnum):
    """Tagged variants for wizard steps; validation dispatches on these."""

    WELCOME = "welcome"
    FORM = "form"
    REVIEW = "review"


class FieldKind(StrEnum):
    """Value shape stored for a field inside the form state."""

    TEXT = "text"
    CHOICE = "choice"
    MULTI = "multi"

    @property
    def is_set(self) -> bool:
        return self is FieldKind.MULTI


@dataclass(frozen=True)
class FieldOption:
    """Selectable option for choice and multi-select fields."""

    value: str
    label: str


@dataclass(frozen=True)
class VisibilityRule:
    """Show a field only while ``field`` currently equals ``equals``."""

    field: str
    equals: str


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of a single form field owned by a step."""

    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    options: tuple[FieldOption, ...] = ()
    placeholder: str = ""
    visible_when: VisibilityRule | None = None

    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)

    def empty_value(self) -> str | frozenset[str]:
        return frozenset() if self.kind.is_set else ""


@dataclass(frozen=True)
class StepDefinition:
    """Metadata + field contract for an individual wizard step."""

    key: str
    title: str
    subtitle: str
    ordinal: int
    kind: StepKind
    fields: tuple[FieldSpec, ...] = ()

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(field.name for field in self.fields if field.required)

    def field(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


NET_WORTH_BRACKETS: Final[tuple[FieldOption, ...]] = (
    FieldOption("1-5m", "$1M - $5M"),
    FieldOption("5-10m", "$5M - $10M"),
    FieldOption("10-25m", "$10M - $25M"),
    FieldOption("25-50m", "$25M - $50M"),
    FieldOption("50-100m", "$50M - $100M"),
    FieldOption("100m+", "$100M+"),
)


def _labelled(*labels: str) -> tuple[FieldOption, ...]:
    return tuple(FieldOption(label, label) for label in labels)


INVESTMENT_INTERESTS: Final[tuple[FieldOption, ...]] = _labelled(
    "Private Equity",
    "Real Estate",
    "Venture Capital",
    "Crypto/Web3",
    "Art & Collectibles",
    "Hedge Funds",
    "Public Markets",
    "Alternative Assets",
)

LUXURY_INTERESTS: Final[tuple[FieldOption, ...]] = _labelled(
    "Private Aviation",
    "Superyachts",
    "Luxury Real Estate",
    "Fine Dining",
    "Exotic Cars",
    "Art & Culture",
    "Exclusive Events",
    "Wellness & Spa",
)

TRAVEL_FREQUENCIES: Final[tuple[FieldOption, ...]] = (
    FieldOption("frequent", "Frequent"),
    FieldOption("occasional", "Occasional"),
    FieldOption("rare", "Rare"),
)

REFERRAL_CHANNELS: Final[tuple[FieldOption, ...]] = (
    FieldOption("referral", "Personal Referral"),
    FieldOption("social", "Social Media"),
    FieldOption("search", "Search Engine"),
    FieldOption("press", "Press/Media"),
    FieldOption("event", "Event/Conference"),
    FieldOption("other", "Other"),
)


MEMBERSHIP_STEPS: Final[tuple[StepDefinition, ...]] = (
    StepDefinition(
        key="welcome",
        title="Welcome",
        subtitle="Let's begin your journey",
        ordinal=0,
        kind=StepKind.WELCOME,
    ),
    StepDefinition(
        key="personal",
        title="Personal Information",
        subtitle="Tell us about yourself",
        ordinal=1,
        kind=StepKind.FORM,
        fields=(
            FieldSpec("first_name", "First Name", required=True, placeholder="John"),
            FieldSpec("last_name", "Last Name", required=True, placeholder="Smith"),
            FieldSpec("email", "Email Address", required=True, placeholder="john@example.com"),
            FieldSpec("phone", "Phone Number", required=True, placeholder="+1 (555) 123-4567"),
        ),
    ),
    StepDefinition(
        key="location",
        title="Location",
        subtitle="Where do you reside?",
        ordinal=2,
        kind=StepKind.FORM,
        fields=(
            FieldSpec(
                "primary_residence",
                "Primary Residence",
                required=True,
                placeholder="London, United Kingdom",
            ),
            FieldSpec(
                "additional_residences",
                "Additional Residences (Optional)",
                placeholder="Monaco, Dubai, New York...",
            ),
        ),
    ),
    StepDefinition(
        key="financial",
        title="Financial Profile",
        subtitle="This information is confidential",
        ordinal=3,
        kind=StepKind.FORM,
        fields=(
            FieldSpec(
                "net_worth",
                "Net Worth Range",
                kind=FieldKind.CHOICE,
                required=True,
                options=NET_WORTH_BRACKETS,
            ),
        ),
    ),
    StepDefinition(
        key="investments",
        title="Investment Interests",
        subtitle="What interests you?",
        ordinal=4,
        kind=StepKind.FORM,
        fields=(
            FieldSpec(
                "investment_interests",
                "Select all that apply",
                kind=FieldKind.MULTI,
                required=True,
                options=INVESTMENT_INTERESTS,
            ),
        ),
    ),
    StepDefinition(
        key="lifestyle",
        title="Lifestyle Preferences",
        subtitle="Your luxury interests",
        ordinal=5,
        kind=StepKind.FORM,
        fields=(
            FieldSpec(
                "luxury_interests",
                "Luxury Interests",
                kind=FieldKind.MULTI,
                required=True,
                options=LUXURY_INTERESTS,
            ),
            FieldSpec(
                "travel_frequency",
                "Travel Frequency",
                kind=FieldKind.CHOICE,
                options=TRAVEL_FREQUENCIES,
            ),
            FieldSpec(
                "preferred_destinations",
                "Preferred Destinations (Optional)",
                placeholder="Monaco, Maldives, Aspen, St. Barts...",
            ),
        ),
    ),
    StepDefinition(
        key="goals",
        title="How Did You Find Us?",
        subtitle="We'd love to know",
        ordinal=6,
        kind=StepKind.FORM,
        fields=(
            FieldSpec(
                "heard_about_us",
                "How did you hear about us?",
                kind=FieldKind.CHOICE,
                required=True,
                options=REFERRAL_CHANNELS,
            ),
            FieldSpec(
                "referral_source",
                "Who referred you?",
                placeholder="Name of person who referred you",
                visible_when=VisibilityRule(field="heard_about_us", equals="referral"),
            ),
        ),
    ),
    StepDefinition(
        key="submit",
        title="Review & Submit",
        subtitle="Confirm your application",
        ordinal=7,
        kind=StepKind.REVIEW,
    ),
)


def step_keys(steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> tuple[str, ...]:
    """Return the canonical step order."""

    return tuple(step.key for step in steps)


def get_step(key: str, steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> StepDefinition | None:
    """Return the step registered under ``key`` if present."""

    for step in steps:
        if step.key == key:
            return step
    return None


def step_at(ordinal: int, steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> StepDefinition | None:
    """Return the step at ``ordinal`` or ``None`` when out of range."""

    if 0 <= ordinal < len(steps):
        return steps[ordinal]
    return None


def iter_fields(steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> Iterator[FieldSpec]:
    """Yield every field declared across ``steps`` in traversal order."""

    for step in steps:
        yield from step.fields


def field_catalog(steps: tuple[StepDefinition, ...] = MEMBERSHIP_STEPS) -> dict[str, FieldSpec]:
    """Return a name -> spec mapping for all fields declared by ``steps``."""

    return {spec.name: spec for spec in iter_fields(steps)}


def check_catalog(steps: tuple[StepDefinition, ...]) -> None:
    """Raise ``ValueError`` when ``steps`` violates the ordering contract."""

    if not steps:
        raise ValueError("A wizard needs at least one step")
    ordinals = [step.ordinal for step in steps]
    if ordinals != list(range(len(steps))):
        raise ValueError(f"Step ordinals must be contiguous and zero-based, got {ordinals}")
    keys = step_keys(steps)
    if len(set(keys)) != len(keys):
        raise ValueError(f"Duplicate step keys: {keys}")
    names = [spec.name for spec in iter_fields(steps)]
    if len(set(names)) != len(names):
        raise ValueError("A field may only be owned by one step")
    catalog = field_catalog(steps)
    for spec in catalog.values():
        rule = spec.visible_when
        if rule is not None and rule.field not in catalog:
            raise ValueError(f"Field '{spec.name}' depends on unknown field '{rule.field}'")


check_catalog(MEMBERSHIP_STEPS)


__all__ = [
    "FieldKind",
    "FieldOption",
    "FieldSpec",
    "INVESTMENT_INTERESTS",
    "LUXURY_INTERESTS",
    "MEMBERSHIP_STEPS",
    "NET_WORTH_BRACKETS",
    "REFERRAL_CHANNELS",
    "StepDefinition",
    "StepKind",
    "TRAVEL_FREQUENCIES",
    "VisibilityRule",
    "check_catalog",
    "field_catalog",
    "get_step",
    "iter_fields",
    "step_at",
    "step_keys",
]
