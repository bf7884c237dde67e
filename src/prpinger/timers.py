"""Single-threaded timer loop with cancellable repeating tasks."""

from __future__ import annotations

import logging
import sched
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class EventLoop:
    """Runs timer callbacks one at a time on the calling thread.

    The clock and delay functions are injectable so the loop can be driven by a
    fake clock. The delay function may return early (for example when terminal
    input arrives); the loop simply waits again for whatever time remains.
    """

    def __init__(
        self,
        timefunc: Callable[[], float] = time.monotonic,
        delayfunc: Callable[[float], object] = time.sleep,
    ) -> None:
        self._timefunc = timefunc
        self._delayfunc = delayfunc
        self._scheduler = sched.scheduler(timefunc, delayfunc)

    def time(self) -> float:
        return self._timefunc()

    def call_later(self, delay: float, callback: Callable[[], None]) -> sched.Event:
        return self._scheduler.enter(delay, 0, callback)

    def cancel(self, event: sched.Event) -> None:
        self._scheduler.cancel(event)

    def every(self, interval: float, callback: Callable[[], None]) -> "RepeatingTimer":
        """Start a repeating timer that first fires ``interval`` seconds from now."""
        timer = RepeatingTimer(self, interval, callback)
        timer.start()
        return timer

    @property
    def pending(self) -> int:
        return len(self._scheduler.queue)

    def run(self) -> None:
        """Block until no timers remain."""
        self._scheduler.run()

    def run_until(self, deadline: float) -> None:
        """Run every timer due at or before ``deadline``, then advance to it."""
        while True:
            next_delay = self._scheduler.run(blocking=False)
            if next_delay is None or self._timefunc() + next_delay > deadline:
                break
            self._delayfunc(next_delay)

        remaining = deadline - self._timefunc()
        if remaining > 0:
            self._delayfunc(remaining)


class RepeatingTimer:
    """A callback re-armed every ``interval`` seconds until cancelled."""

    def __init__(self, loop: EventLoop, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError("Timer interval must be greater than 0.")
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._event: Optional[sched.Event] = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def start(self) -> None:
        if self._cancelled or self._event is not None:
            return
        self._arm()

    def _arm(self) -> None:
        self._event = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        self._event = None
        if self._cancelled:
            return
        # Re-arm first so the callback can cancel this timer.
        self._arm()
        self._callback()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._event is not None:
            self._loop.cancel(self._event)
            self._event = None
        logger.debug("Cancelled repeating timer", extra={"interval_seconds": self._interval})
