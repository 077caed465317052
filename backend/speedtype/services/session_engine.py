"""
State machine for a single timed typing attempt.

A session starts ``active``. Every input update recomputes accuracy, WPM and
momentum; typing the reference text exactly, or running the countdown down to
zero, moves it to ``terminal``. Terminal is absorbing: later input, countdown
ticks and decay ticks change nothing. On entering terminal the session hands
one :class:`AttemptCandidate` to every subscriber, exactly once.

The session never sleeps. Whoever owns it calls :meth:`TypingSession.tick_countdown`
once per second after the countdown has started and
:meth:`TypingSession.tick_decay` every :data:`DECAY_INTERVAL` seconds; see
``speedtype.services.session_runner`` for the asyncio driver.
"""

import logging
import math
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from speedtype.models.models import Subscription
from speedtype.services.text_pool import pick_text

logger = logging.getLogger(__name__)

TIME_BUDGET_SECONDS = 60
COUNTDOWN_INTERVAL = 1.0
DECAY_INTERVAL = 0.1

MOMENTUM_START = 50.0
MOMENTUM_MIN = 10.0
MOMENTUM_MAX = 90.0
MOMENTUM_RISE = 0.5
MOMENTUM_FALL = 2.0
MOMENTUM_DECAY = 0.2

# Floors the WPM denominator at t=0
MIN_ELAPSED_MINUTES = 0.01


class Phase(str, Enum):
    ACTIVE = "active"
    TERMINAL = "terminal"


class Outcome(str, Enum):
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class AttemptCandidate:
    """Measurements emitted once when a session ends."""

    wpm: int
    accuracy: int
    time_taken: int
    text_length: int

    def to_payload(self, user_id: str, attempt_id: Optional[str] = None) -> Dict[str, Any]:
        """Builds the camelCase body expected by ``POST /results``."""
        payload = {
            "userId": user_id,
            "wpm": self.wpm,
            "accuracy": self.accuracy,
            "timeTaken": self.time_taken,
            "textLength": self.text_length,
        }
        if attempt_id:
            payload["attemptId"] = attempt_id
        return payload


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, halves going up."""
    return math.floor(value + 0.5)


def compute_accuracy(typed: str, reference: str) -> int:
    """Percentage of typed characters matching the reference at the same index.

    Args:
        typed (str): The input buffer.
        reference (str): The text being copied.

    Returns:
        int: Rounded percentage in [0, 100]; 100 for an empty buffer.
    """
    if not typed:
        return 100
    correct = sum(
        1 for typed_char, ref_char in zip(typed, reference) if typed_char == ref_char
    )
    return round_half_up(correct / len(typed) * 100)


def count_words(typed: str) -> int:
    return len(typed.split())


def compute_wpm(typed: str, elapsed_seconds: float) -> int:
    """Whitespace-delimited words per minute of elapsed time."""
    minutes = max(elapsed_seconds / 60, MIN_ELAPSED_MINUTES)
    return round_half_up(count_words(typed) / minutes)


def clamp_momentum(value: float) -> float:
    return max(MOMENTUM_MIN, min(MOMENTUM_MAX, value))


FinishListener = Callable[[AttemptCandidate], Any]


class TypingSession:
    """One typing attempt against a reference text.

    Args:
        text: Reference text. Sampled from the tier's pool when omitted.
        tier: Subscription tier deciding which texts can be sampled.
        on_finish: Optional first listener for the terminal result.
        clock: Monotonic clock in seconds, injectable for tests.
        rng: Random source for text sampling.
        time_budget: Countdown length in seconds.
    """

    def __init__(
        self,
        text: Optional[str] = None,
        tier: Union[str, Subscription] = Subscription.FREE,
        on_finish: Optional[FinishListener] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        time_budget: int = TIME_BUDGET_SECONDS,
    ):
        self.tier = tier
        self.clock = clock
        self.rng = rng
        self.time_budget = time_budget
        self._listeners: List[FinishListener] = []
        if on_finish is not None:
            self._listeners.append(on_finish)
        self._reset(text)

    def _reset(self, text: Optional[str]) -> None:
        self.text = text if text is not None else pick_text(self.tier, self.rng)
        if not self.text:
            raise ValueError("Reference text must not be empty")
        self.typed = ""
        self.remaining = self.time_budget
        self.wpm = 0
        self.accuracy = 100
        self.momentum = MOMENTUM_START
        self.started_at: Optional[float] = None
        self.phase = Phase.ACTIVE
        self.discarded = False
        self.result: Optional[AttemptCandidate] = None

    def subscribe(self, listener: FinishListener) -> None:
        """Registers a callback receiving the terminal result."""
        self._listeners.append(listener)

    @property
    def is_active(self) -> bool:
        return self.phase is Phase.ACTIVE and not self.discarded

    @property
    def countdown_started(self) -> bool:
        return self.started_at is not None

    @property
    def progress(self) -> float:
        """Share of the reference text typed so far, capped at 100."""
        return min(100.0, len(self.typed) / len(self.text) * 100)

    @property
    def outcome(self) -> Optional[Outcome]:
        if self.phase is not Phase.TERMINAL:
            return None
        return Outcome.COMPLETED if self.typed == self.text else Outcome.TIMED_OUT

    def update_input(self, buffer: str) -> None:
        """Applies a new input buffer. Ignored once the session is over."""
        if not self.is_active:
            return

        self.typed = buffer
        if buffer and self.started_at is None:
            self.started_at = self.clock()

        self.accuracy = compute_accuracy(buffer, self.text)

        if buffer:
            elapsed = self.clock() - self.started_at
            self.wpm = compute_wpm(buffer, elapsed)
            if self.text.startswith(buffer):
                self.momentum = clamp_momentum(self.momentum + MOMENTUM_RISE)
            else:
                self.momentum = clamp_momentum(self.momentum - MOMENTUM_FALL)

        if buffer == self.text:
            self._finish()

    def tick_countdown(self) -> None:
        """Advances the countdown by one second."""
        if not self.is_active or not self.countdown_started:
            return
        self.remaining = max(0, self.remaining - 1)
        if self.remaining == 0:
            self._finish()

    def tick_decay(self) -> None:
        """Applies idle decay to momentum."""
        if not self.is_active:
            return
        self.momentum = clamp_momentum(self.momentum - MOMENTUM_DECAY)

    def discard(self) -> None:
        """Drops an unfinished attempt without emitting a result."""
        if self.phase is Phase.ACTIVE:
            self.discarded = True

    def play_again(self, text: Optional[str] = None) -> None:
        """Starts a fresh attempt with a newly sampled text and reset state."""
        self._reset(text)

    def _finish(self) -> None:
        self.phase = Phase.TERMINAL
        self.result = AttemptCandidate(
            wpm=self.wpm,
            accuracy=self.accuracy,
            time_taken=self.time_budget - self.remaining,
            text_length=len(self.text),
        )
        for listener in list(self._listeners):
            try:
                listener(self.result)
            except Exception:
                # A failing listener must not stop the others or the session
                logger.exception("Finish listener %r failed", listener)
