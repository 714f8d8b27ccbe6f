"""Mapping from keyboard keys to the sixteen CHIP-8 keys."""

from __future__ import annotations

import logging
from typing import Iterable

log = logging.getLogger(__name__)

KEYMAP: dict[str, int] = {
    "kp1": 0x1,
    "kp2": 0x2,
    "kp3": 0x3,
    "kp4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
    "slash": 0xB,
    "kp_multiply": 0xF,
}

QUIT_KEY = "escape"


class InputHandler:
    """Holds the pressed state of the keypad and whether the emulator should run."""

    def __init__(self) -> None:
        self.running = True
        self._keys = (False,) * 16

    def update(self, pressed: Iterable[str]) -> None:
        """Recompute the keypad from the names of the keys held down now."""
        keys = [False] * 16
        for name in pressed:
            name = name.lower()
            if name == QUIT_KEY:
                log.debug("Escape pressed, stopping game")
                self.running = False
                continue
            key = KEYMAP.get(name)
            if key is not None:
                keys[key] = True
                log.debug("Key %X (%s) pressed", key, name)
        self._keys = tuple(keys)

    def get_keys(self) -> tuple[bool, ...]:
        return self._keys