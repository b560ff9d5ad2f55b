# =============================================================================
# core/thread_manager.py
#
# ThreadManager — lifecycle registry for the monitor's stoppable parts.
#
# Camera, audio mixer and display window are registered in start order.
# start_all() is fail-fast: the first component that raises aborts startup.
# stop_all() runs in reverse order (LIFO) and never re-raises, so a
# half-initialised application still releases what it did acquire.
# =============================================================================

import time
from typing import Callable, List, Optional, Tuple
from core.logger import get_logger

log = get_logger(__name__)


class ThreadManager:
    """
    Usage:
        tm = ThreadManager()
        tm.register("Camera",  camera.open,  camera.release)
        tm.register("Alarm",   alarm.start,  alarm.stop)
        tm.start_all()
        # ... tick loop ...
        tm.stop_all()
    """

    def __init__(self):
        self._components: List[Tuple[str, Optional[Callable], Optional[Callable]]] = []
        self._started:    List[str] = []
        self._t0 = time.time()

    def register(
        self,
        name:     str,
        start_fn: Optional[Callable] = None,
        stop_fn:  Optional[Callable] = None,
    ) -> None:
        """
        Register a component for lifecycle management.

        Args:
            name:     Human-readable component name (for logging)
            start_fn: Callable to start the component (or None)
            stop_fn:  Callable to stop/cleanup the component (or None)
        """
        self._components.append((name, start_fn, stop_fn))
        log.debug(f"Registered component: {name}")

    def start_all(self) -> None:
        """Start all registered components in registration order."""
        log.info("=" * 50)
        log.info("  Starting Eye Closure Monitor")
        log.info("=" * 50)

        for name, start_fn, _ in self._components:
            if start_fn is not None:
                t0 = time.perf_counter()
                try:
                    start_fn()
                except Exception as e:
                    log.error(f"  ✗  {name} failed to start: {e}")
                    raise
                elapsed = (time.perf_counter() - t0) * 1000
                log.info(f"  ✓  {name:<20} started  ({elapsed:.0f}ms)")
            else:
                log.info(f"  ✓  {name:<20} registered (no start fn)")
            self._started.append(name)

        total = (time.time() - self._t0) * 1000
        log.info(f"  All components ready in {total:.0f}ms")

    def stop_all(self) -> None:
        """
        Stop started components in reverse order (LIFO).
        Errors during shutdown are logged but never re-raised.
        """
        log.info("Shutting down Eye Closure Monitor …")

        for name, _, stop_fn in reversed(self._components):
            if name not in self._started or stop_fn is None:
                continue
            try:
                stop_fn()
                log.info(f"  ✓  {name} stopped.")
            except Exception as e:
                log.error(f"  ✗  {name} shutdown error: {e}", exc_info=True)

        self._started.clear()
        log.info("Eye Closure Monitor shut down cleanly.")

    @property
    def started(self) -> List[str]:
        """Names of components started so far, in start order."""
        return list(self._started)
