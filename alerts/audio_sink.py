"""
alerts/audio_sink.py — pygame mixer playback for the alarm sound.

play() starts the sound on a mixer channel and returns immediately with a
handle; the mixer plays it in the background for the sound's natural length.
"""

import os

import pygame

import config
from core.logger import get_logger

log = get_logger(__name__)


class PygameAlarmHandle:
    """One playing sound. stop() may be called any number of times."""

    def __init__(self, channel: "pygame.mixer.Channel | None", duration: float):
        self._channel = channel
        self.duration = duration

    def stop(self) -> None:
        if self._channel is not None:
            self._channel.stop()


class PygameAudioSink:
    """
    Usage:
        sink = PygameAudioSink()
        sink.start()
        handle = sink.play(config.ALARM_SOUND_PATH)
        handle.stop()
        sink.stop()
    """

    def __init__(
        self,
        frequency: int = config.MIXER_FREQUENCY,
        buffer: int = config.MIXER_BUFFER,
    ):
        self._frequency = frequency
        self._buffer = buffer
        self._ready: bool = False
        self._sounds: dict[str, pygame.mixer.Sound] = {}

    # ──────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Initialise the pygame mixer. Raises pygame.error if no device."""
        pygame.mixer.pre_init(
            frequency=self._frequency, size=-16, channels=2, buffer=self._buffer
        )
        pygame.mixer.init()
        self._ready = True
        log.info("pygame mixer ready.")

    def stop(self) -> None:
        """Stop all channels and tear down the mixer."""
        if self._ready:
            pygame.mixer.stop()
            pygame.mixer.quit()
            self._ready = False
            self._sounds.clear()

    # ──────────────────────────────────────────────────────────────────────────
    # Playback
    # ──────────────────────────────────────────────────────────────────────────

    def play(self, path: str) -> PygameAlarmHandle:
        """
        Start playing a sound file.

        Args:
            path: Path to a .wav/.ogg file.

        Returns:
            Handle for the playing sound.

        Raises:
            RuntimeError:  mixer not initialised.
            FileNotFoundError: asset missing.
            pygame.error:  asset unreadable.
        """
        if not self._ready:
            raise RuntimeError("audio mixer not initialised")

        sound = self._sounds.get(path)
        if sound is None:
            if not os.path.isfile(path):
                raise FileNotFoundError(path)
            sound = pygame.mixer.Sound(path)
            self._sounds[path] = sound
            log.info(f"Loaded sound: {path} ({sound.get_length():.1f}s)")

        channel = sound.play()
        return PygameAlarmHandle(channel, sound.get_length())
