from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WizardSessionKeys:
    """Namespaced session-state keys for one wizard session."""

    session_id: str

    @property
    def prefix(self) -> str:
        return f"wiz:{self.session_id}:"

    def namespace(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def widget(self, step_key: str, field: str, suffix: str = "") -> str:
        """Return a widget key that is unique per session, step and field."""

        base = self.namespace(f"{step_key}:{field}")
        return f"{base}:{suffix}" if suffix else base
