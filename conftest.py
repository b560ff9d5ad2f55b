# =============================================================================
# conftest.py — shared fakes for the test suite.
# No camera, window or audio device is needed to run the tests.
# =============================================================================

import threading

import numpy as np
import pytest

from eye_monitor.data_structures import EyeRegion


OPEN_EYE   = EyeRegion(100, 100, 40, 20)   # ratio 0.50
CLOSED_EYE = EyeRegion(200, 100, 40, 4)    # ratio 0.10


class FakeClock:
    """Manually advanced clock; values are kept in integer milliseconds."""

    def __init__(self, start_ms: int = 0):
        self.ms = start_ms

    def __call__(self) -> float:
        return self.ms / 1000.0

    def advance(self, ms: int) -> None:
        self.ms += ms


class FakeFrameSource:
    """Yields a blank BGR frame per acquire(), or None when scripted to."""

    def __init__(self, shape=(120, 160, 3)):
        self.shape = shape
        self.script = []   # optional per-call overrides: None or an ndarray
        self.calls = 0

    def acquire(self):
        self.calls += 1
        if self.script:
            return self.script.pop(0)
        return np.zeros(self.shape, dtype=np.uint8)


class ScriptedDetector:
    """Returns `default` regions unless a per-call script entry is queued."""

    def __init__(self, default=None):
        self.default = list(default or [])
        self.script = []
        self.calls = 0

    def detect(self, gray):
        self.calls += 1
        if self.script:
            entry = self.script.pop(0)
            if isinstance(entry, Exception):
                raise entry
            return entry
        return list(self.default)


class RecordingAlarm:
    def __init__(self):
        self.fired = 0
        self.recovered = 0

    def on_closed_sustained(self):
        self.fired += 1
        return True

    def on_recovered(self):
        self.recovered += 1


class RecordingStatus:
    def __init__(self):
        self.messages = []

    def set_text(self, text):
        self.messages.append(text)

    @property
    def text(self):
        return self.messages[-1] if self.messages else ""


class FakeHandle:
    def __init__(self, duration: float):
        self.duration = duration
        self.stop_calls = 0

    def stop(self):
        self.stop_calls += 1


class FakeAudioSink:
    """AudioSink stand-in; play() can be told to fail."""

    def __init__(self, duration: float = 30.0, fail_with: Exception = None):
        self.duration = duration
        self.fail_with = fail_with
        self.start_error = None
        self.started = False
        self.stopped = False
        self.handles = []
        self.played = threading.Event()

    def start(self):
        if self.start_error is not None:
            raise self.start_error
        self.started = True

    def stop(self):
        self.stopped = True

    def play(self, path):
        try:
            if self.fail_with is not None:
                raise self.fail_with
            handle = FakeHandle(self.duration)
            self.handles.append(handle)
            return handle
        finally:
            self.played.set()


@pytest.fixture
def clock():
    return FakeClock(start_ms=10_000)


@pytest.fixture
def status():
    return RecordingStatus()


@pytest.fixture
def alarm_asset(tmp_path):
    path = tmp_path / "alarm.wav"
    path.write_bytes(b"RIFF")
    return str(path)
