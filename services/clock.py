"""Time and noise sources injected into the simulation."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from threading import Lock
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class NoiseSource(Protocol):
    """Subset of :class:`random.Random` used by the engine."""

    def uniform(self, a: float, b: float) -> float:
        ...


class SystemClock:
    """UTC wall clock that never moves backwards between calls."""

    def __init__(self) -> None:
        self._last: Optional[datetime] = None
        self._lock = Lock()

    def now(self) -> datetime:
        with self._lock:
            current = datetime.now(timezone.utc)
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current


def build_noise_source(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)
