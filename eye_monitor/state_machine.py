# =============================================================================
# eye_monitor/state_machine.py
#
# Drowsiness monitor — time-debounced eye-closure state machine.
#
# Problem without debounce:
#   A single frame with no open eye (a blink, a missed detection) would
#   sound the alarm immediately.
#
# Solution: a hold timer.
#   The first all-closed tick records closure_start_time.  The alarm only
#   fires once `now - closure_start_time >= hold` while every tick since
#   has stayed all-closed.  Any open eye clears the timer and the alarm.
#
# State diagram:
#
#   AWAKE ──closed──→ CLOSING ──closed, elapsed ≥ hold──→ ALARMED
#     ↑                  │                                  │
#     └──────open────────┴───────────────open───────────────┘
#
# The monitor compares timestamps only, so it is correct for any tick
# interval, including irregular or missed ticks.  It performs no I/O.
# =============================================================================

from typing import Optional

from config import CLOSURE_HOLD_SECONDS
from eye_monitor.data_structures import (
    MonitorState, STATE_AWAKE, STATE_CLOSING, STATE_ALARMED,
    EVENT_ALARM, EVENT_RECOVERED,
)
from core.logger import get_logger

log = get_logger(__name__)


class DrowsinessMonitor:
    """
    Turns per-tick all-closed flags into alarm / recovery events.

    Usage:
        monitor = DrowsinessMonitor()
        event = monitor.update(all_closed, time.monotonic())
        # event is "ALARM", "RECOVERED" or None
    """

    def __init__(self, hold_seconds: float = CLOSURE_HOLD_SECONDS):
        if hold_seconds < 0:
            raise ValueError(f"hold_seconds must be >= 0, got {hold_seconds}")
        self.hold_seconds = hold_seconds
        self._state = MonitorState()

    # ── Public API ────────────────────────────────────────────────────────────

    def update(self, all_closed: bool, now: float) -> Optional[str]:
        """
        Advance the state machine by one tick.

        Args:
            all_closed: True if no detected eye was classified open.
            now:        Tick timestamp in seconds.

        Returns:
            EVENT_ALARM on entering ALARMED, EVENT_RECOVERED on leaving
            CLOSING/ALARMED for AWAKE, otherwise None.
        """
        if not all_closed:
            return self._recover()

        state = self._state
        if state.alarm_active:
            return None

        if state.closure_start_time is None:
            state.closure_start_time = now
            log.debug(f"Eyes closed — hold timer started at {now:.3f}")
            # A zero hold fires on the very first closed tick
            if self.hold_seconds > 0:
                return None

        if now - state.closure_start_time >= self.hold_seconds:
            state.alarm_active = True
            log.info(f"Monitor state: {STATE_CLOSING} → {STATE_ALARMED} "
                     f"(closed for {now - state.closure_start_time:.2f}s)")
            return EVENT_ALARM

        return None

    def reset(self) -> None:
        """Return to AWAKE without emitting an event."""
        self._state = MonitorState()
        log.info("DrowsinessMonitor reset.")

    def elapsed(self, now: float) -> float:
        """Seconds the current closure run has lasted, 0.0 when AWAKE."""
        if self._state.closure_start_time is None:
            return 0.0
        return max(0.0, now - self._state.closure_start_time)

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def state(self) -> str:
        return self._state.name

    @property
    def closure_start_time(self) -> Optional[float]:
        return self._state.closure_start_time

    @property
    def alarm_active(self) -> bool:
        return self._state.alarm_active

    @property
    def snapshot(self) -> MonitorState:
        """Copy of the current state."""
        return MonitorState(self._state.closure_start_time, self._state.alarm_active)

    # ── Private ───────────────────────────────────────────────────────────────

    def _recover(self) -> Optional[str]:
        previous = self._state.name
        self._state.closure_start_time = None
        self._state.alarm_active = False
        if previous == STATE_AWAKE:
            return None
        if previous == STATE_ALARMED:
            log.info(f"Monitor state: {previous} → {STATE_AWAKE}")
        else:
            log.debug(f"Monitor state: {previous} → {STATE_AWAKE}")
        return EVENT_RECOVERED
