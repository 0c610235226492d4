"""Timer-driven replay of a scripted concierge conversation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Final, Sequence

import streamlit as st

from wizard.timers import TimerRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevealEvent:
    """Move the replay to ``step`` once ``delay`` seconds have passed since start.

    Transient events (typing indicators) are only shown while they are the
    current step; all others stay visible once revealed.
    """

    step: int
    delay: float
    speaker: str = "concierge"
    text: str = ""
    transient: bool = False


DEFAULT_TIMELINE: Final[tuple[RevealEvent, ...]] = (
    RevealEvent(1, 1.0, "member", "I need a G650 from London to Dubai this Friday. 4 passengers, departing 9 AM."),
    RevealEvent(2, 2.5, transient=True),
    RevealEvent(3, 4.0, text="Got it. Let me check what's available for Friday morning..."),
    RevealEvent(4, 6.5, text="I've got three options: G650, Global 7500 or Falcon 8X. Shall I book the Global 7500?"),
    RevealEvent(5, 10.0, "member", "Yes, confirm the Global 7500."),
    RevealEvent(6, 11.0, transient=True),
    RevealEvent(7, 12.5, text="You're booked on the Global 7500. Itinerary details follow shortly."),
)
CONFIRMATION_DELAY: Final[float] = 0.5

_CONFIRMATION_TIMER = "replay-confirmation"


class ConversationReplay:
    """Reveal a linear conversation one step at a time.

    ``start`` schedules every event once; calling it again has no effect.
    ``cancel`` drops whatever has not fired yet, so a replay torn down with its
    page never touches state afterwards. The step counter only moves forward.
    """

    def __init__(
        self,
        timeline: Sequence[RevealEvent] = DEFAULT_TIMELINE,
        *,
        timers: TimerRegistry | None = None,
        confirmation_delay: float = CONFIRMATION_DELAY,
        on_change: Callable[["ConversationReplay"], None] | None = None,
    ) -> None:
        self._timeline = tuple(sorted(timeline, key=lambda event: event.delay))
        self._timers = timers if timers is not None else TimerRegistry()
        self._confirmation_delay = confirmation_delay
        self._on_change = on_change
        self._step = 0
        self._show_confirmation = False
        self._started = False
        self._cancelled = False

    @property
    def step(self) -> int:
        return self._step

    @property
    def show_confirmation(self) -> bool:
        return self._show_confirmation

    @property
    def started(self) -> bool:
        return self._started

    @property
    def final_step(self) -> int:
        return max((event.step for event in self._timeline), default=0)

    @property
    def finished(self) -> bool:
        return self._show_confirmation or (self._started and not self._timeline)

    def visible_events(self) -> tuple[RevealEvent, ...]:
        """Return the events a renderer should currently show, in order."""

        return tuple(
            event
            for event in self._timeline
            if event.step <= self._step and (not event.transient or event.step == self._step)
        )

    def start(self) -> bool:
        if self._started or self._cancelled:
            return False
        self._started = True
        for index, event in enumerate(self._timeline):
            self._timers.schedule(event.delay, self._reveal_callback(event), name=f"replay-{index}")
        logger.debug("Scheduled %d reveal event(s)", len(self._timeline))
        return True

    def cancel(self) -> int:
        self._cancelled = True
        return self._timers.cancel_all()

    def _reveal_callback(self, event: RevealEvent) -> Callable[[], None]:
        def _reveal() -> None:
            self._reveal(event)

        return _reveal

    def _reveal(self, event: RevealEvent) -> None:
        if self._cancelled or event.step <= self._step:
            return
        self._step = event.step
        if event.step == self.final_step:
            self._timers.schedule(self._confirmation_delay, self._confirm, name=_CONFIRMATION_TIMER)
        self._changed()

    def _confirm(self) -> None:
        if self._cancelled:
            return
        self._show_confirmation = True
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)


def render_conversation_replay(timeline: Sequence[RevealEvent] = DEFAULT_TIMELINE, *, poll_interval: float = 0.1) -> None:
    """Play ``timeline`` into a Streamlit placeholder until it finishes."""

    placeholder = st.empty()

    def _draw(replay: ConversationReplay) -> None:
        with placeholder.container():
            for event in replay.visible_events():
                with st.chat_message("user" if event.speaker == "member" else "assistant"):
                    st.write("..." if event.transient else event.text)
            if replay.show_confirmation:
                st.success("All set")

    async def _play() -> None:
        replay = ConversationReplay(timeline, on_change=_draw)
        replay.start()
        try:
            while not replay.finished:
                await asyncio.sleep(poll_interval)
        finally:
            replay.cancel()

    asyncio.run(_play())


__all__ = [
    "CONFIRMATION_DELAY",
    "ConversationReplay",
    "DEFAULT_TIMELINE",
    "RevealEvent",
    "render_conversation_replay",
]
