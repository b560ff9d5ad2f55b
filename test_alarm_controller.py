# =============================================================================
# test_alarm_controller.py — alarm session lifecycle against a fake sink
# Run: pytest test_alarm_controller.py
# =============================================================================

import time

import config
from alerts.alarm_controller import AlarmController, AlarmSession
from conftest import FakeAudioSink

WAIT = 2.0


def _controller(sink, status, asset):
    alarm = AlarmController(sink, status_sink=status, asset_path=asset)
    alarm.start()
    return alarm


def test_start_brings_up_sink_quietly(status, alarm_asset):
    sink = FakeAudioSink()
    _controller(sink, status, alarm_asset)
    assert sink.started
    assert status.messages == []


def test_missing_asset_is_reported_not_raised(status, tmp_path):
    missing = str(tmp_path / "nope.wav")
    _controller(FakeAudioSink(), status, missing)
    assert status.text == config.STATUS_ALARM_MISSING.format(path=missing)


def test_sink_start_failure_is_reported_not_raised(status, alarm_asset):
    sink = FakeAudioSink()
    sink.start_error = RuntimeError("no audio device")
    _controller(sink, status, alarm_asset)
    assert "no audio device" in status.text


def test_fire_plays_once_without_blocking(status, alarm_asset):
    sink = FakeAudioSink(duration=30.0)
    alarm = _controller(sink, status, alarm_asset)

    assert alarm.on_closed_sustained() is True
    assert sink.played.wait(WAIT)
    assert alarm.is_playing
    assert alarm.alarm_count == 1
    assert len(sink.handles) == 1
    assert config.STATUS_EYES_NOT_DETECTED in status.messages
    alarm.stop()


def test_double_start_is_ignored(status, alarm_asset):
    sink = FakeAudioSink()
    alarm = _controller(sink, status, alarm_asset)
    alarm.on_closed_sustained()
    assert sink.played.wait(WAIT)

    assert alarm.on_closed_sustained() is False
    assert alarm.alarm_count == 1
    assert len(sink.handles) == 1
    alarm.stop()


def test_recovery_stops_playback_and_rearms(status, alarm_asset):
    sink = FakeAudioSink()
    alarm = _controller(sink, status, alarm_asset)
    alarm.on_closed_sustained()
    assert sink.played.wait(WAIT)
    session = alarm.session

    alarm.on_recovered()
    session.join(WAIT)
    assert not session.is_alive
    assert sink.handles[0].stop_calls >= 1
    assert alarm.is_playing is False
    assert alarm.session is None

    sink.played.clear()
    assert alarm.on_closed_sustained() is True
    assert sink.played.wait(WAIT)
    assert len(sink.handles) == 2
    alarm.stop()


def test_recovery_is_idempotent(status, alarm_asset):
    alarm = _controller(FakeAudioSink(), status, alarm_asset)
    alarm.on_recovered()
    alarm.on_recovered()
    assert alarm.is_playing is False


def test_playback_failure_reports_and_allows_retry(status, alarm_asset):
    sink = FakeAudioSink(fail_with=OSError("cannot decode"))
    alarm = _controller(sink, status, alarm_asset)

    alarm.on_closed_sustained()
    assert sink.played.wait(WAIT)
    deadline = time.monotonic() + WAIT
    expected = config.STATUS_ALARM_ERROR.format(error="cannot decode")
    while status.text != expected and time.monotonic() < deadline:
        time.sleep(0.005)

    assert alarm.session is None
    assert alarm.is_playing is False
    assert alarm.failure_count == 1
    assert status.text == expected

    sink.fail_with = None
    sink.played.clear()
    assert alarm.on_closed_sustained() is True
    assert sink.played.wait(WAIT)
    alarm.stop()


def test_session_finishes_after_sound_length(alarm_asset):
    sink = FakeAudioSink(duration=0.05)
    session = AlarmSession(sink, alarm_asset, on_failed=lambda s, e: None)
    session.start()
    session.join(WAIT)
    assert not session.is_alive
    assert sink.handles[0].stop_calls == 1


def test_cancel_before_start_never_plays(alarm_asset):
    sink = FakeAudioSink()
    session = AlarmSession(sink, alarm_asset, on_failed=lambda s, e: None)
    session.cancel()
    session.cancel()
    session.start()
    session.join(WAIT)
    assert sink.handles == []
    assert session.cancelled


def test_stop_cancels_live_session_and_sink(status, alarm_asset):
    sink = FakeAudioSink()
    alarm = _controller(sink, status, alarm_asset)
    alarm.on_closed_sustained()
    assert sink.played.wait(WAIT)
    session = alarm.session

    alarm.stop()
    assert not session.is_alive
    assert sink.stopped
