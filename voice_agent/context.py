"""
Application context shared by the route handlers.

Everything a handler needs besides its request lives here: when the process
started, which clocks to read, and how to pick among generic chat templates.
The app factory builds one context and stores it on ``app.state``; tests build
their own with a fixed selector and fake clocks.
"""

import random
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Sequence


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_ms(moment: datetime) -> str:
    """UTC timestamp with millisecond precision, e.g. 2025-01-01T12:00:00.000Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def epoch_ms() -> int:
    return int(time.time() * 1000)


# ── Template selection ────────────────────────────────────────────────────────

class TemplateSelector(Protocol):
    def choose(self, candidates: Sequence[str]) -> str:
        ...


class RandomSelector:
    """Uniform pick among the candidates."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def choose(self, candidates: Sequence[str]) -> str:
        return self._rng.choice(candidates)


class FixedSelector:
    """Always picks the candidate at ``index`` (wrapped around the list)."""

    def __init__(self, index: int = 0):
        self.index = index

    def choose(self, candidates: Sequence[str]) -> str:
        return candidates[self.index % len(candidates)]


# ── Clocks ────────────────────────────────────────────────────────────────────

class MillisecondClock:
    """
    Epoch milliseconds, strictly increasing within the process.

    Two reads landing in the same millisecond get distinct values: the later
    one is bumped past the previous reading.
    """

    def __init__(self, source: Callable[[], int] = epoch_ms):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = max(self._source(), self._last + 1)
            self._last = now
            return now


@dataclass
class AppContext:
    selector: TemplateSelector = field(default_factory=RandomSelector)
    clock: Callable[[], datetime] = utc_now
    millis: MillisecondClock = field(default_factory=MillisecondClock)
    monotonic: Callable[[], float] = time.monotonic
    started_at: Optional[float] = None

    def __post_init__(self):
        if self.started_at is None:
            self.started_at = self.monotonic()

    def uptime(self) -> int:
        """Whole seconds since the context was created."""
        return max(0, int(self.monotonic() - self.started_at))

    def timestamp(self) -> str:
        return isoformat_ms(self.clock())
