"""Bookkeeping for deferred callbacks owned by a wizard session."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class TimerRegistry:
    """Track ``loop.call_later`` handles so they can be cancelled together.

    A session tears down every pending callback when it closes, so no timer
    fires against state that no longer exists. Handles are dropped from the
    registry once they run or are cancelled.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handles: dict[str, asyncio.TimerHandle] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def schedule(self, delay: float, callback: Callable[[], None], *, name: str | None = None) -> str:
        """Run ``callback`` after ``delay`` seconds on the event loop.

        Scheduling under an existing ``name`` replaces the previous timer.

        Returns:
            The name under which the timer is tracked.
        """

        loop = self._loop or asyncio.get_running_loop()
        if name is None:
            self._counter += 1
            name = f"timer-{self._counter}"
        self.cancel(name)

        def _fire() -> None:
            self._handles.pop(name, None)
            callback()

        self._handles[name] = loop.call_later(max(0.0, delay), _fire)
        logger.debug("Scheduled timer '%s' in %.2fs", name, delay)
        return name

    def cancel(self, name: str) -> bool:
        handle = self._handles.pop(name, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug("Cancelled timer '%s'", name)
        return True

    def cancel_all(self) -> int:
        """Cancel every pending timer and return how many were pending."""

        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug("Cancelled %d pending timer(s)", len(handles))
        return len(handles)


__all__ = ["TimerRegistry"]
