"""
Asyncio driver for a TypingSession.

Runs the two periodic timers a session needs: idle decay from the moment the
runner starts, and the one-second countdown from the first keystroke. Both
are cancelled as soon as the session turns terminal or is discarded.
"""

import asyncio
import logging
from typing import Optional

from speedtype.services.session_engine import (
    COUNTDOWN_INTERVAL,
    DECAY_INTERVAL,
    AttemptCandidate,
    TypingSession,
)

logger = logging.getLogger(__name__)


class SessionRunner:
    def __init__(
        self,
        session: TypingSession,
        countdown_interval: float = COUNTDOWN_INTERVAL,
        decay_interval: float = DECAY_INTERVAL,
    ):
        self.session = session
        self.countdown_interval = countdown_interval
        self.decay_interval = decay_interval
        self._countdown_task: Optional[asyncio.Task] = None
        self._decay_task: Optional[asyncio.Task] = None
        self._finished = asyncio.Event()
        session.subscribe(self._on_terminal)

    def start(self) -> None:
        """Starts idle decay. Must be called from a running event loop."""
        if self._decay_task is None and self.session.is_active:
            self._decay_task = asyncio.create_task(self._decay_loop())

    def type(self, buffer: str) -> None:
        """Feeds one input update to the session."""
        self.session.update_input(buffer)
        if (
            self.session.is_active
            and self.session.countdown_started
            and self._countdown_task is None
        ):
            self._countdown_task = asyncio.create_task(self._countdown_loop())

    async def wait_finished(
        self, timeout: Optional[float] = None
    ) -> Optional[AttemptCandidate]:
        """Waits until the session turns terminal or is discarded.

        Returns the result, or None for a discarded session.
        """
        await asyncio.wait_for(self._finished.wait(), timeout)
        return self.session.result

    def discard(self) -> None:
        """Drops the attempt without emitting anything and stops the timers."""
        self.session.discard()
        self._cancel_timers()
        self._finished.set()

    def play_again(self, text: Optional[str] = None) -> None:
        """Resets the session and restarts idle decay."""
        self._cancel_timers()
        self._finished = asyncio.Event()
        self.session.play_again(text)
        self.start()

    async def stop(self) -> None:
        """Cancels the timers and waits for them to wind down."""
        tasks = self._cancel_timers()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _on_terminal(self, result: AttemptCandidate) -> None:
        logger.debug("Session finished: %s", result)
        self._cancel_timers()
        self._finished.set()

    def _cancel_timers(self):
        tasks = [t for t in (self._countdown_task, self._decay_task) if t is not None]
        current = asyncio.current_task() if _loop_running() else None
        for task in tasks:
            if task is not current:
                task.cancel()
        self._countdown_task = None
        self._decay_task = None
        return tasks

    async def _countdown_loop(self) -> None:
        while self.session.is_active:
            await asyncio.sleep(self.countdown_interval)
            self.session.tick_countdown()

    async def _decay_loop(self) -> None:
        while self.session.is_active:
            await asyncio.sleep(self.decay_interval)
            self.session.tick_decay()


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
        return True
    except RuntimeError:
        return False
