"""Fixed-period background loop that drives simulation ticks."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Event, Lock
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickScheduler:
    """Runs ``callback`` every ``interval`` seconds on a single worker thread.

    Ticks never overlap. When a tick overruns, the periods it covered are
    skipped rather than replayed. ``stop`` lets the running tick finish.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        interval: float = 1.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("Tick interval must be positive.")
        self.callback = callback
        self.interval = interval
        self._monotonic = monotonic
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="monitor-tick")
        self._stop_event = Event()
        self._future: Optional[Future[None]] = None
        self._lock = Lock()
        self.skipped_periods = 0

    @property
    def running(self) -> bool:
        with self._lock:
            return self._future is not None and not self._future.done()

    def start(self) -> None:
        with self._lock:
            if self._future is not None and not self._future.done():
                return
            self._stop_event.clear()
            self._future = self.executor.submit(self._run)
        logger.info("Tick scheduler started.", extra={"duration_ms": int(self.interval * 1000)})

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop scheduling ticks and wait for an in-flight one to complete."""
        self._stop_event.set()
        with self._lock:
            future = self._future
        if future is not None:
            future.result(timeout=timeout)
        logger.info("Tick scheduler stopped.")

    def shutdown(self) -> None:
        self.stop()
        self.executor.shutdown(wait=True)

    def _run(self) -> None:
        next_deadline = self._monotonic() + self.interval
        while not self._stop_event.wait(max(0.0, next_deadline - self._monotonic())):
            try:
                self.callback()
            except Exception:  # the loop must survive a failing tick
                logger.exception("Tick failed.")

            next_deadline += self.interval
            now = self._monotonic()
            if now >= next_deadline:
                missed = int((now - next_deadline) // self.interval) + 1
                next_deadline += missed * self.interval
                with self._lock:
                    self.skipped_periods += missed
                logger.warning(
                    "Tick overran its period; skipping missed ticks.",
                    extra={"tick": missed},
                )
