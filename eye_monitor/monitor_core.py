# =============================================================================
# eye_monitor/monitor_core.py
#
# MonitorCore — one detection pass per tick.
#
# Call flow per tick:
#   1. frame_source.acquire()              → BGR frame or None (skip tick)
#   2. to_grayscale(frame)                 → 2D gray frame
#   3. detector.detect(gray)               → [EyeRegion]
#   4. estimator.estimate_all(regions)     → [ClosureSample]
#   5. aggregate_all_closed(samples)       → bool
#   6. monitor.update(all_closed, now)     → "ALARM" / "RECOVERED" / None
#   7. alarm.on_closed_sustained() / alarm.on_recovered()
#   8. annotator + display_sink            → cosmetic only
#
# A failure in steps 1–4 abandons the tick before the monitor is touched.
# A failure in steps 7–8 is logged; the monitor has already advanced.
# Nothing raised inside a tick escapes tick().
# =============================================================================

import time
from typing import Callable, Optional

import numpy as np

import config
from camera.capture import to_grayscale
from eye_monitor.closure_estimator import ClosureEstimator, aggregate_all_closed
from eye_monitor.data_structures import TickResult, EVENT_ALARM, EVENT_RECOVERED
from eye_monitor.state_machine import DrowsinessMonitor
from core.logger import get_logger

log = get_logger(__name__)


class MonitorCore:
    """
    Single entry point for the per-tick pipeline.

    Usage:
        core = MonitorCore(camera, detector, ClosureEstimator(),
                           DrowsinessMonitor(), alarm, display,
                           display_sink=display, annotator=FrameAnnotator())
        result = core.tick()     # TickResult, or None if the tick was skipped
    """

    def __init__(
        self,
        frame_source,
        detector,
        estimator: ClosureEstimator,
        monitor: DrowsinessMonitor,
        alarm,
        status_sink=None,
        display_sink=None,
        annotator=None,
        clock: Callable[[], float] = time.monotonic,
        grayscale: Callable[[np.ndarray], np.ndarray] = to_grayscale,
    ):
        self._source    = frame_source
        self._detector  = detector
        self._estimator = estimator
        self._monitor   = monitor
        self._alarm     = alarm
        self._status    = status_sink
        self._display   = display_sink
        self._annotator = annotator
        self._clock     = clock
        self._grayscale = grayscale

        self._frame_count   = 0
        self._skipped_ticks = 0
        self._alarm_events  = 0
        self._fps           = 0.0
        self._fps_count     = 0
        self._last_fps_time = clock()
        self._last_result: Optional[TickResult] = None

        log.info("MonitorCore initialized.")

    # ── Main Update ───────────────────────────────────────────────────────────

    def tick(self) -> Optional[TickResult]:
        """
        Run one detection pass.

        Returns:
            TickResult for a processed frame, or None when no frame was
            available or the frame could not be processed.
        """
        try:
            frame = self._source.acquire()
        except Exception as exc:
            self._skipped_ticks += 1
            log.error(f"Frame source failed: {exc}", exc_info=True)
            return None
        if frame is None:
            return None

        # ── Detection (no state touched yet) ──────────────────────────────
        try:
            gray    = self._grayscale(frame)
            regions = self._detector.detect(gray)
            samples = self._estimator.estimate_all(regions)
        except Exception as exc:
            self._skipped_ticks += 1
            log.warning(f"Skipping malformed frame: {exc}", exc_info=True)
            return None

        # ── Decision ──────────────────────────────────────────────────────
        all_closed = aggregate_all_closed(samples)
        now = self._clock()
        event = self._monitor.update(all_closed, now)

        result = TickResult(
            samples    = samples,
            all_closed = all_closed,
            state      = self._monitor.state,
            event      = event,
            timestamp  = now,
        )

        self._dispatch(event)
        if result.open_count:
            self._report(config.STATUS_EYES_DETECTED)

        # ── Presentation ──────────────────────────────────────────────────
        self._present(frame, result)

        self._frame_count += 1
        self._update_fps(now)
        self._log_telemetry(result)
        self._last_result = result
        return result

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _dispatch(self, event: Optional[str]) -> None:
        try:
            if event == EVENT_ALARM:
                self._alarm_events += 1
                self._alarm.on_closed_sustained()
            elif event == EVENT_RECOVERED:
                self._alarm.on_recovered()
        except Exception as exc:
            log.error(f"Alarm controller failed on {event}: {exc}", exc_info=True)

    def _present(self, frame: np.ndarray, result: TickResult) -> None:
        if self._display is None:
            return
        try:
            if self._annotator is not None:
                self._annotator.annotate(frame, result.samples)
            self._display.show(frame)
        except Exception as exc:
            log.warning(f"Display failed: {exc}")

    def _report(self, text: str) -> None:
        if self._status is None:
            return
        try:
            self._status.set_text(text)
        except Exception as exc:
            log.error(f"Status sink failed: {exc}")

    def _update_fps(self, now: float) -> None:
        self._fps_count += 1
        if now - self._last_fps_time >= 1.0:
            self._fps = self._fps_count / (now - self._last_fps_time)
            self._fps_count = 0
            self._last_fps_time = now

    def _log_telemetry(self, result: TickResult) -> None:
        ratios = ", ".join(f"{s.ratio:.2f}" for s in result.samples) or "-"
        msg = (f"Frame {self._frame_count} | eyes={len(result.samples)} "
               f"open={result.open_count} | ratios=[{ratios}] | "
               f"{result.state} closed_for={self._monitor.elapsed(result.timestamp):.2f}s | "
               f"{self._fps:.1f} fps")
        if config.DEBUG_MODE:
            log.info(msg)
        else:
            log.debug(msg)

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def skipped_ticks(self) -> int:
        return self._skipped_ticks

    @property
    def alarm_events(self) -> int:
        return self._alarm_events

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def monitor(self) -> DrowsinessMonitor:
        return self._monitor

    @property
    def last_result(self) -> Optional[TickResult]:
        """Most recent processed tick, None before the first frame."""
        return self._last_result
