"""Contextual log fields shared by every wizard log record.

Each record gets ``session_id``, ``wizard_step`` and ``attempt`` attributes,
taken from context variables, so a single wizard session can be followed
through the log even when several sessions are open in one process.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Final, Iterator

_LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s [session=%(session_id)s step=%(wizard_step)s "
    "attempt=%(attempt)s] %(name)s: %(message)s"
)
_UNSET: Final[str] = "-"

_CONTEXT_VARS: Final[dict[str, contextvars.ContextVar[str]]] = {
    name: contextvars.ContextVar(name, default=_UNSET) for name in ("session_id", "wizard_step", "attempt")
}
_base_factory = logging.getLogRecordFactory()
_factory_installed = False


def _normalise(value: object | None) -> str:
    if value is None:
        return _UNSET
    return str(value).strip() or _UNSET


def _stamp(record: logging.LogRecord) -> logging.LogRecord:
    for name, var in _CONTEXT_VARS.items():
        setattr(record, name, var.get())
    return record


class _ContextFilter(logging.Filter):
    """Stamp records created before the record factory was installed."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - logging protocol
        if not hasattr(record, "session_id"):
            _stamp(record)
        return True


def configure_logging(*, level: int | None = None) -> None:
    """Install the context-aware format on the root logger.

    Safe to call repeatedly (Streamlit reruns the entrypoint on every
    interaction); only ``level`` is re-applied on later calls.
    """

    global _factory_installed
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_LOG_FORMAT)
    else:
        for handler in root.handlers:
            if handler.formatter is None:
                handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    if level is not None:
        root.setLevel(level)
    if not any(isinstance(flt, _ContextFilter) for flt in root.filters):
        root.addFilter(_ContextFilter())
    if not _factory_installed:

        def _factory(*args: object, **kwargs: object) -> logging.LogRecord:
            return _stamp(_base_factory(*args, **kwargs))

        logging.setLogRecordFactory(_factory)
        _factory_installed = True


@contextmanager
def log_context(
    *,
    session_id: str | None = None,
    wizard_step: str | None = None,
    attempt: int | None = None,
) -> Iterator[None]:
    """Temporarily bind the given fields; ``None`` leaves a field untouched."""

    requested = {"session_id": session_id, "wizard_step": wizard_step, "attempt": attempt}
    tokens = [
        (_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(_normalise(value)))
        for name, value in requested.items()
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = ["configure_logging", "log_context"]
