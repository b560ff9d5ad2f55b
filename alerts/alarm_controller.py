"""
alerts/alarm_controller.py — Alarm lifecycle for sustained eye closure.

on_closed_sustained() starts one AlarmSession; on_recovered() cancels it.
Each session plays the alarm sound on its own daemon thread so the tick
loop never waits for audio.  At most one session is live at a time.
"""

import os
import threading
from typing import Callable, Optional

import config
from core.logger import get_logger

log = get_logger(__name__)


class AlarmSession:
    """
    One alarm playback.  The worker thread plays the asset, waits for its
    length (or for cancel()), then stops the sound.  cancel() is idempotent
    and safe before, during or after playback.
    """

    def __init__(
        self,
        sink,
        asset_path: str,
        on_failed: Callable[["AlarmSession", Exception], None],
    ):
        self._sink = sink
        self._asset_path = asset_path
        self._on_failed = on_failed
        self._stop = threading.Event()
        self._handle = None
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._run, daemon=True, name="alarm-session"
        )
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()
        handle = self._handle
        if handle is not None:
            handle.stop()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        if self._stop.is_set():
            return
        try:
            handle = self._sink.play(self._asset_path)
        except Exception as exc:
            self._on_failed(self, exc)
            return

        self._handle = handle
        # Wait out the sound's natural length unless cancelled first
        self._stop.wait(timeout=handle.duration)
        handle.stop()


class AlarmController:
    """
    Usage:
        alarm = AlarmController(PygameAudioSink(), status_sink)
        alarm.start()
        alarm.on_closed_sustained()   # fire
        alarm.on_recovered()          # stop + re-arm
        alarm.stop()
    """

    def __init__(
        self,
        sink,
        status_sink=None,
        asset_path: str = config.ALARM_SOUND_PATH,
    ):
        self._sink = sink
        self._status = status_sink
        self.asset_path = asset_path

        self._lock = threading.Lock()
        self._session: AlarmSession | None = None
        self._playing: bool = False
        self._alarm_count: int = 0
        self._failure_count: int = 0

    # ──────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────────────────

    def start(self) -> None:
        """
        Bring up the audio sink and check the alarm asset.
        Neither failure is fatal: detection keeps running without sound.
        """
        try:
            self._sink.start()
        except Exception as exc:
            log.warning(f"Audio init failed: {exc}. Alarm will be silent.")
            self._report(config.STATUS_ALARM_ERROR.format(error=exc))

        if not os.path.isfile(self.asset_path):
            log.warning(f"Alarm sound missing: {self.asset_path}")
            self._report(config.STATUS_ALARM_MISSING.format(path=self.asset_path))

    def stop(self) -> None:
        """Cancel any live session and shut the sink down."""
        with self._lock:
            session, self._session = self._session, None
            self._playing = False
        if session is not None:
            session.cancel()
            session.join(timeout=config.ALARM_JOIN_TIMEOUT)
        self._sink.stop()

    # ──────────────────────────────────────────────────────────────────────────
    # Monitor events
    # ──────────────────────────────────────────────────────────────────────────

    def on_closed_sustained(self) -> bool:
        """
        Start the alarm.

        Returns:
            True if a new session was started, False if one is already playing.
        """
        with self._lock:
            if self._playing:
                log.debug("Alarm already playing — trigger ignored.")
                return False
            session = AlarmSession(self._sink, self.asset_path, self._session_failed)
            self._session = session
            self._playing = True
            self._alarm_count += 1

        log.warning(f"ALARM #{self._alarm_count}: eyes closed too long.")
        self._report(config.STATUS_EYES_NOT_DETECTED)
        session.start()
        return True

    def on_recovered(self) -> None:
        """Stop any playing alarm and re-arm. Safe to call at any time."""
        with self._lock:
            session, self._session = self._session, None
            was_playing = self._playing
            self._playing = False
        if session is not None:
            session.cancel()
        if was_playing:
            log.info("Alarm stopped — eyes open.")

    # ──────────────────────────────────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────────────────────────────────

    def _session_failed(self, session: AlarmSession, exc: Exception) -> None:
        """Called on the session thread when playback cannot start."""
        with self._lock:
            if self._session is session:
                self._session = None
                self._playing = False
            self._failure_count += 1
        log.error(f"Alarm playback failed: {exc}")
        self._report(config.STATUS_ALARM_ERROR.format(error=exc))

    def _report(self, text: str) -> None:
        if self._status is None:
            return
        try:
            self._status.set_text(text)
        except Exception as exc:
            log.error(f"Status sink failed: {exc}")

    # ──────────────────────────────────────────────────────────────────────────
    # Properties
    # ──────────────────────────────────────────────────────────────────────────

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def alarm_count(self) -> int:
        """Sessions started since construction."""
        return self._alarm_count

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def session(self) -> AlarmSession | None:
        return self._session

    # ──────────────────────────────────────────────────────────────────────────
    # Context manager
    # ──────────────────────────────────────────────────────────────────────────

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *_):
        self.stop()
