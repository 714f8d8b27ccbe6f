"""The CHIP-8 interpreter: memory, registers, timers and the instruction set."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from chipeight.audio import Audio
from chipeight.display import Display

log = logging.getLogger(__name__)

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
STACK_DEPTH = 16
FONT_WIDTH = 5

FONTSET = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)


class Chip8Error(Exception):
    """Raised when a program cannot continue: bad opcode, stack fault, bad address."""


class CPU:
    """A CHIP-8 machine wired to a display and a beeper."""

    def __init__(
        self,
        display: Display | None = None,
        audio: Audio | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.display = display if display is not None else Display()
        self.audio = audio if audio is not None else Audio.silent()
        self._rng = rng if rng is not None else random.Random()
        self.memory = bytearray(MEMORY_SIZE)
        self.memory[: len(FONTSET)] = FONTSET
        self.v = [0] * 16
        self.i = 0
        self.pc = PROGRAM_START
        self.stack: list[int] = []
        self.delay_timer = 0
        self.sound_timer = 0
        self.waiting_register: int | None = None

    def load_rom(self, rom: bytes) -> None:
        """Copy a program into memory at 0x200."""
        if len(rom) > MEMORY_SIZE - PROGRAM_START:
            raise Chip8Error("ROM is too big")
        self.memory[PROGRAM_START : PROGRAM_START + len(rom)] = rom

    def _read(self, address: int) -> int:
        if not 0 <= address < MEMORY_SIZE:
            raise Chip8Error(f"Memory address out of range: {address:04X}")
        return self.memory[address]

    def _write(self, address: int, value: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            raise Chip8Error(f"Memory address out of range: {address:04X}")
        self.memory[address] = value & 0xFF

    @staticmethod
    def _key(keys: Sequence[bool], index: int) -> bool:
        if not 0 <= index < len(keys):
            raise Chip8Error(f"Key index out of range: {index}")
        return bool(keys[index])

    def step(self, keys: Sequence[bool]) -> None:
        """Run one instruction with the given keypad state, then tick the timers.

        While an FX0A instruction is waiting, nothing runs until a key is down.
        """
        for index, down in enumerate(keys):
            if not down:
                continue
            if self.waiting_register is not None:
                self.v[self.waiting_register] = index
                log.debug("Stored keypress %d in V%X", index, self.waiting_register)
                self.waiting_register = None
                break
            log.debug("Key %d pressed", index)

        if self.waiting_register is not None:
            return

        opcode = (self._read(self.pc) << 8) | self._read(self.pc + 1)
        self.pc += 2
        self._execute(opcode, keys)

        if self.display.is_open():
            self.display.refresh()

        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.audio.play()
            self.sound_timer -= 1
        else:
            self.audio.pause()

    def _execute(self, opcode: int, keys: Sequence[bool]) -> None:
        v = self.v
        x = (opcode & 0x0F00) >> 8
        y = (opcode & 0x00F0) >> 4
        nnn = opcode & 0x0FFF
        nn = opcode & 0x00FF
        n = opcode & 0x000F
        unknown = Chip8Error(f"Unknown opcode: {opcode:04X}")

        match opcode & 0xF000:
            case 0x0000:
                if opcode == 0x00E0:
                    self.display.clear_screen()
                elif opcode == 0x00EE:
                    if not self.stack:
                        raise Chip8Error("Stack underflow")
                    self.pc = self.stack.pop()
                else:
                    log.debug("Unimplemented machine code routine: %04X", opcode)
            case 0x1000:
                self.pc = nnn
            case 0x2000:
                if len(self.stack) >= STACK_DEPTH:
                    raise Chip8Error("Stack overflow")
                self.stack.append(self.pc)
                self.pc = nnn
            case 0x3000:
                if v[x] == nn:
                    self.pc += 2
            case 0x4000:
                if v[x] != nn:
                    self.pc += 2
            case 0x5000:
                if v[x] == v[y]:
                    self.pc += 2
            case 0x6000:
                v[x] = nn
            case 0x7000:
                v[x] = (v[x] + nn) & 0xFF
            case 0x8000:
                self._arithmetic(n, x, y, unknown)
            case 0x9000:
                if v[x] != v[y]:
                    self.pc += 2
            case 0xA000:
                self.i = nnn
            case 0xB000:
                self.pc = nnn + v[0]
            case 0xC000:
                v[x] = self._rng.randrange(256) & nn
            case 0xD000:
                sprite = [self._read(self.i + row) for row in range(n)]
                v[0xF] = self.display.draw(sprite, v[x], v[y])
            case 0xE000:
                if nn == 0x9E:
                    if self._key(keys, v[x]):
                        self.pc += 2
                elif nn == 0xA1:
                    if not self._key(keys, v[x]):
                        self.pc += 2
                else:
                    raise unknown
            case 0xF000:
                self._misc(nn, x, unknown)
            case _:
                raise unknown
        log.debug("Executed %04X", opcode)

    def _arithmetic(self, n: int, x: int, y: int, unknown: Chip8Error) -> None:
        v = self.v
        match n:
            case 0x0:
                v[x] = v[y]
            case 0x1:
                v[x] |= v[y]
            case 0x2:
                v[x] &= v[y]
            case 0x3:
                v[x] ^= v[y]
            case 0x4:
                total = v[x] + v[y]
                v[0xF] = 1 if total > 0xFF else 0
                v[x] = total & 0xFF
            case 0x5:
                v[0xF] = 1 if v[x] >= v[y] else 0
                v[x] = (v[x] - v[y]) & 0xFF
            case 0x6:
                v[0xF] = v[x] & 0x1
                v[x] >>= 1
            case 0x7:
                v[0xF] = 1 if v[y] >= v[x] else 0
                v[x] = (v[y] - v[x]) & 0xFF
            case 0xE:
                v[0xF] = (v[x] & 0x80) >> 7
                v[x] = (v[x] << 1) & 0xFF
            case _:
                raise unknown

    def _misc(self, nn: int, x: int, unknown: Chip8Error) -> None:
        v = self.v
        match nn:
            case 0x07:
                v[x] = self.delay_timer
            case 0x0A:
                self.waiting_register = x
            case 0x15:
                self.delay_timer = v[x]
            case 0x18:
                self.sound_timer = v[x]
            case 0x1E:
                self.i = (self.i + v[x]) & 0xFFFF
            case 0x29:
                self.i = (v[x] * FONT_WIDTH) & 0xFF
            case 0x33:
                self._write(self.i, v[x] // 100)
                self._write(self.i + 1, (v[x] % 100) // 10)
                self._write(self.i + 2, v[x] % 10)
            case 0x55:
                for index in range(x + 1):
                    self._write(self.i + index, v[index])
            case 0x65:
                for index in range(x + 1):
                    v[index] = self._read(self.i + index)
            case _:
                raise unknown