"""
main.py — Eye Closure Monitor Entry Point
Wires the camera, eye detector, drowsiness monitor and alarm into a
~30 Hz tick loop.

Pipeline per tick:
  1. CameraCapture.acquire()
  2. to_grayscale()
  3. EyeRegionDetector.detect()         → Haar eye boxes
  4. ClosureEstimator.estimate_all()    → height/width openness per eye
  5. DrowsinessMonitor.update()         → AWAKE / CLOSING / ALARMED
  6. AlarmController                    → pygame alarm on sustained closure
  7. FrameAnnotator + OpenCVDisplay     → annotated camera feed

Usage:
  python main.py
  python main.py --camera 1
  python main.py --cascade /path/to/haarcascade_eye.xml   # OpenCV build without bundled cascades
  python main.py --alarm sounds/beep.wav
  python main.py --headless            # no window, status goes to the log
  python main.py --debug               # per-tick telemetry on the console
"""

import sys
import argparse

import config
from camera.capture             import CameraCapture, CameraUnavailableError
from detection.eye_detector     import EyeRegionDetector, DetectorLoadError
from eye_monitor.closure_estimator import ClosureEstimator
from eye_monitor.state_machine  import DrowsinessMonitor
from eye_monitor.monitor_core   import MonitorCore
from alerts.alarm_controller    import AlarmController
from alerts.audio_sink          import PygameAudioSink
from ui.annotator               import FrameAnnotator
from ui.display                 import OpenCVDisplay, LogStatusSink
from core.scheduler             import TickScheduler
from core.thread_manager        import ThreadManager
from core.logger                import get_logger

log = get_logger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Argument parsing
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Eye Closure Monitor — drowsiness alarm")
    p.add_argument("--camera",   type=int, default=config.CAMERA_INDEX,
                   help=f"Camera device index (default: {config.CAMERA_INDEX}).")
    p.add_argument("--cascade",  default=config.EYE_CASCADE_PATH,
                   help="Path to the Haar eye cascade XML.")
    p.add_argument("--alarm",    default=config.ALARM_SOUND_PATH,
                   help="Path to the alarm sound file.")
    p.add_argument("--headless", action="store_true",
                   help="Run without a display window.")
    p.add_argument("--debug",    action="store_true",
                   help="Log per-tick telemetry on the console.")
    return p.parse_args(argv)


# ──────────────────────────────────────────────────────────────────────────────
# Application
# ──────────────────────────────────────────────────────────────────────────────

class MonitorApp:
    """
    Builds the collaborators and runs the tick loop.
    Call run(); press 'q' in the window (or Ctrl-C) to stop.
    """

    def __init__(self, args):
        self.args = args
        if args.debug:
            config.DEBUG_MODE = True

        self.lifecycle = ThreadManager()
        self.scheduler = None

    def _build(self) -> None:
        # Detector first: without a cascade there is nothing to run
        self.detector = EyeRegionDetector(cascade_path=self.args.cascade)

        self.camera = CameraCapture(camera_index=self.args.camera)

        if self.args.headless:
            self.display = None
            self.status = LogStatusSink()
        else:
            self.display = OpenCVDisplay()
            self.status = self.display

        self.alarm = AlarmController(
            PygameAudioSink(), status_sink=self.status, asset_path=self.args.alarm
        )

        self.core = MonitorCore(
            frame_source = self.camera,
            detector     = self.detector,
            estimator    = ClosureEstimator(),
            monitor      = DrowsinessMonitor(),
            alarm        = self.alarm,
            status_sink  = self.status,
            display_sink = self.display,
            annotator    = FrameAnnotator() if self.display is not None else None,
        )

        self.lifecycle.register("Camera", self.camera.open, self.camera.release)
        self.lifecycle.register("Alarm",  self.alarm.start, self.alarm.stop)
        if self.display is not None:
            self.lifecycle.register("Display", None, self.display.close)

        self.scheduler = TickScheduler(config.TICK_INTERVAL_MS / 1000.0, self._tick)

    def _tick(self) -> bool:
        self.core.tick()
        if self.display is not None and self.display.poll_key() == ord("q"):
            log.info("'q' pressed — shutting down.")
            return False
        return True

    def run(self) -> int:
        """Returns a process exit code."""
        try:
            self._build()
            self.lifecycle.start_all()
        except DetectorLoadError as exc:
            log.error(f"FATAL: {exc}")
            return 2
        except CameraUnavailableError as exc:
            log.error(f"FATAL: {exc}")
            self.status.set_text(str(exc))
            self.lifecycle.stop_all()
            return 1

        try:
            self.scheduler.run()
        except KeyboardInterrupt:
            log.info("KeyboardInterrupt — shutting down.")
        finally:
            self.scheduler.stop()
            log.info(f"Processed {self.core.frame_count} frames, "
                     f"{self.core.skipped_ticks} skipped, "
                     f"{self.alarm.alarm_count} alarms.")
            self.lifecycle.stop_all()
        return 0


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None) -> int:
    return MonitorApp(parse_args(argv)).run()


if __name__ == "__main__":
    sys.exit(main())
