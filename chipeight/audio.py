"""The beeper: a 440 Hz tone that is either playing or paused."""

from __future__ import annotations

import math
from array import array
from typing import Any

FREQUENCY = 440.0
TONE_SECONDS = 0.05
_AMPLITUDE = 8000


def _sine_wave_sound() -> Any:
    import pygame

    try:
        if pygame.mixer.get_init() is None:
            pygame.mixer.init(frequency=44100, size=-16, channels=1)
        rate, _size, channels = pygame.mixer.get_init()
        count = int(rate * TONE_SECONDS)
        samples = array("h")
        for index in range(count):
            value = int(_AMPLITUDE * math.sin(2 * math.pi * FREQUENCY * index / rate))
            samples.extend([value] * channels)
        return pygame.mixer.Sound(buffer=samples.tobytes())
    except pygame.error as exc:
        raise RuntimeError(str(exc)) from exc


class Audio:
    """A tone that loops while playing; starts paused."""

    def __init__(self, sound: Any = None) -> None:
        self._sound = _sine_wave_sound() if sound is None else sound
        self.playing = False

    @classmethod
    def silent(cls) -> "Audio":
        """Return an Audio that keeps the play/pause state but makes no sound."""
        audio = cls.__new__(cls)
        audio._sound = None
        audio.playing = False
        return audio

    def play(self) -> None:
        if self.playing:
            return
        if self._sound is not None:
            self._sound.play(loops=-1)
        self.playing = True

    def pause(self) -> None:
        if not self.playing:
            return
        if self._sound is not None:
            self._sound.stop()
        self.playing = False