# =============================================================================
# core/scheduler.py
#
# TickScheduler — fixed-interval tick driver on a single thread.
#
# Each tick runs to completion before the next is scheduled.  The wait
# after a tick is the remainder of the interval measured from the tick's
# start; a tick that overruns simply delays the next one.  Missed ticks
# are dropped, never replayed in a burst.
# =============================================================================

import threading
import time
from typing import Callable, Optional

from core.logger import get_logger

log = get_logger(__name__)


class TickScheduler:
    """
    Usage:
        sched = TickScheduler(0.033, core.tick)
        sched.run()          # blocks until stop() or tick_fn returns False
    """

    def __init__(
        self,
        interval_s: float,
        tick_fn: Callable[[], Optional[bool]],
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self._interval  = interval_s
        self._tick_fn   = tick_fn
        self._clock     = clock
        self._stop      = threading.Event()
        self._tick_count = 0
        self._overruns   = 0

    def run(self) -> None:
        """Drive ticks on the calling thread until stopped."""
        self._stop.clear()
        log.info(f"Tick loop running every {self._interval * 1000:.0f}ms.")

        while not self._stop.is_set():
            started = self._clock()
            keep_going = self._tick_fn()
            self._tick_count += 1
            if keep_going is False:
                log.info("Tick function requested stop.")
                break

            remaining = self._interval - (self._clock() - started)
            if remaining <= 0:
                self._overruns += 1
                log.debug(f"Tick {self._tick_count} overran by {-remaining * 1000:.1f}ms")
                continue
            self._stop.wait(timeout=remaining)

        log.info(f"Tick loop stopped after {self._tick_count} ticks "
                 f"({self._overruns} overruns).")

    def stop(self) -> None:
        """Request the loop to exit. Safe from any thread, idempotent."""
        self._stop.set()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def overruns(self) -> int:
        return self._overruns
