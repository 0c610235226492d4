"""Central configuration for the membership application wizard.

Values are read from the process environment (``.env`` files are honoured via
python-dotenv) once at import time into :data:`SETTINGS`. Tests and hosts that
need different values call :func:`load_settings` with an explicit mapping.

``MEMBERSHIP_DISMISS_DELAY`` controls how long the success screen stays up
before the wizard closes itself; ``MEMBERSHIP_SUBMIT_TIMEOUT`` bounds a single
gateway call. ``MEMBERSHIP_SIMULATED_LATENCY`` only affects the demo gateway.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

load_dotenv()


logger = logging.getLogger(__name__)

_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")

DEFAULT_DISMISS_DELAY = 3.0
DEFAULT_SUBMIT_TIMEOUT = 30.0
DEFAULT_SUBMIT_MAX_TRIES = 3
DEFAULT_SIMULATED_LATENCY = 2.0
DEFAULT_LOG_LEVEL = "INFO"


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _parse_positive_int_env(value: object | None, *, env_var: str, default: int) -> int:
    """Return a positive integer parsed from ``value`` or ``default``."""

    if value is None:
        return default
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        try:
            parsed = int(float(candidate))
        except ValueError:
            warnings.warn(
                "%s is not a number; ignoring %s" % (candidate, env_var),
                RuntimeWarning,
            )
            return default
    elif isinstance(value, (int, float)):
        parsed = int(value)
    else:
        warnings.warn(
            "Unsupported %s value '%s'; falling back to %d." % (env_var, value, default),
            RuntimeWarning,
        )
        return default
    if parsed <= 0:
        return default
    return parsed


def _normalise_seconds(
    value: object | None,
    *,
    env_var: str,
    default: float,
    allow_zero: bool = False,
) -> float:
    """Return a non-negative duration in seconds."""

    if value is None:
        return default
    candidate = value
    if isinstance(candidate, str):
        stripped = candidate.strip()
        if not stripped:
            return default
        try:
            candidate = float(stripped)
        except ValueError:
            warnings.warn(
                "Unsupported %s '%s'; falling back to %.1f seconds." % (env_var, candidate, default),
                RuntimeWarning,
            )
            return default
    if isinstance(candidate, (int, float)):
        seconds = float(candidate)
        if seconds > 0 or (allow_zero and seconds == 0):
            return seconds
    warnings.warn(
        "%s must be a positive number; falling back to %.1f seconds." % (env_var, default),
        RuntimeWarning,
    )
    return default


def _normalise_log_level(value: str | None) -> int:
    if not value or not value.strip():
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    warnings.warn(
        "Unsupported MEMBERSHIP_LOG_LEVEL '%s'; falling back to %s." % (value, DEFAULT_LOG_LEVEL),
        RuntimeWarning,
    )
    return logging.getLevelName(DEFAULT_LOG_LEVEL)


@dataclass(frozen=True, slots=True)
class WizardSettings:
    """Runtime knobs for the wizard engine and its demo host."""

    dismiss_delay: float = DEFAULT_DISMISS_DELAY
    submit_timeout: float = DEFAULT_SUBMIT_TIMEOUT
    submit_max_tries: int = DEFAULT_SUBMIT_MAX_TRIES
    simulated_latency: float = DEFAULT_SIMULATED_LATENCY
    log_level: int = logging.INFO
    trace_console: bool = False


def load_settings(environ: Mapping[str, str] | None = None) -> WizardSettings:
    """Build :class:`WizardSettings` from ``environ`` (defaults to ``os.environ``).

    Args:
        environ: Optional mapping used instead of the process environment.

    Returns:
        Parsed settings; invalid entries fall back to their defaults with a
        ``RuntimeWarning``.
    """

    env = os.environ if environ is None else environ
    return WizardSettings(
        dismiss_delay=_normalise_seconds(
            env.get("MEMBERSHIP_DISMISS_DELAY"),
            env_var="MEMBERSHIP_DISMISS_DELAY",
            default=DEFAULT_DISMISS_DELAY,
            allow_zero=True,
        ),
        submit_timeout=_normalise_seconds(
            env.get("MEMBERSHIP_SUBMIT_TIMEOUT"),
            env_var="MEMBERSHIP_SUBMIT_TIMEOUT",
            default=DEFAULT_SUBMIT_TIMEOUT,
        ),
        submit_max_tries=_parse_positive_int_env(
            env.get("MEMBERSHIP_SUBMIT_MAX_TRIES"),
            env_var="MEMBERSHIP_SUBMIT_MAX_TRIES",
            default=DEFAULT_SUBMIT_MAX_TRIES,
        ),
        simulated_latency=_normalise_seconds(
            env.get("MEMBERSHIP_SIMULATED_LATENCY"),
            env_var="MEMBERSHIP_SIMULATED_LATENCY",
            default=DEFAULT_SIMULATED_LATENCY,
            allow_zero=True,
        ),
        log_level=_normalise_log_level(env.get("MEMBERSHIP_LOG_LEVEL")),
        trace_console=_is_truthy_flag(env.get("MEMBERSHIP_TRACE_CONSOLE")),
    )


SETTINGS = load_settings()


__all__ = [
    "DEFAULT_DISMISS_DELAY",
    "DEFAULT_SIMULATED_LATENCY",
    "DEFAULT_SUBMIT_MAX_TRIES",
    "DEFAULT_SUBMIT_TIMEOUT",
    "SETTINGS",
    "WizardSettings",
    "load_settings",
]
