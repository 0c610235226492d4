"""Navigation helpers for the Streamlit wizard."""

from __future__ import annotations

from wizard.navigation.host import close_hosted_wizard, get_hosted_wizard, open_hosted_wizard, run_submission
from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.state import (
    NavigationButtonState,
    NavigationDirection,
    NavigationState,
    build_navigation_state,
)
from wizard.navigation.ui import render_navigation, render_progress

__all__ = [
    "NavigationButtonState",
    "NavigationDirection",
    "NavigationState",
    "WizardSessionKeys",
    "build_navigation_state",
    "close_hosted_wizard",
    "get_hosted_wizard",
    "open_hosted_wizard",
    "render_navigation",
    "render_progress",
    "run_submission",
]
