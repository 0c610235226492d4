from pathlib import Path
import sys
from dataclasses import dataclass

import streamlit as st

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import WizardSettings  # noqa: E402
from wizard.controller import WizardController  # noqa: E402
from wizard.gateway import LoggingSubmissionGateway  # noqa: E402
from wizard.session import WizardSession  # noqa: E402


@dataclass
class _SessionDict(dict[str, object]):
    """Lightweight replacement for ``st.session_state`` during tests."""

    def clear(self) -> None:  # type: ignore[override]
        super().clear()


@pytest.fixture(autouse=True)
def _stub_streamlit_session_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Streamlit's runtime-bound session state with a plain dictionary."""

    session_state = _SessionDict()
    monkeypatch.setattr(st, "session_state", session_state, raising=False)
    yield


@pytest.fixture
def fast_settings() -> WizardSettings:
    """Settings with delays short enough for the event loop in tests."""

    return WizardSettings(dismiss_delay=0.01, submit_timeout=1.0, submit_max_tries=3, simulated_latency=0.0)


@pytest.fixture
def accepting_gateway() -> LoggingSubmissionGateway:
    return LoggingSubmissionGateway()


@pytest.fixture
def controller(accepting_gateway: LoggingSubmissionGateway, fast_settings: WizardSettings) -> WizardController:
    return WizardController(WizardSession.open(), gateway=accepting_gateway, settings=fast_settings)
