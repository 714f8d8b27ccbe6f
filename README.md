# chipeight

A CHIP-8 interpreter. It loads a `.ch8` ROM into the standard 4 KiB memory
map (programs start at `0x200`, the built-in hex font sits at `0x000`), runs
eight instructions per frame of about 16 ms, and draws the 64×32 monochrome
screen in a pygame window. A 440 Hz tone sounds while the sound timer is
running.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running a ROM

```
chipeight path/to/game.ch8
```

Press Escape or close the window to stop the emulator. When it stops, the
command prints `Emulator closed successfully`, or `Emulator error: ...` if the
ROM could not be read or the program hit an error.

Options:

| Option                 | Effect                                                       |
|------------------------|--------------------------------------------------------------|
| `-s N`, `--scale N`    | Display scale: `0` = 8× (512×256, default), `1` = 10× (640×320), `2` = 12× (768×384) |
| `--no-audio`           | Run without sound                                            |
| `--list-recent`        | Print the recent ROMs, numbered from 0 (newest)              |
| `-r N`, `--recent N`   | Run recent ROM number N                                      |
| `--clear-recent`       | Forget all recent ROMs                                       |
| `--recent-file PATH`   | Where the recent list is kept (default `recent_roms.json` in the working directory) |

A ROM given on the command line that runs and closes without error is put at
the front of the recent list, which holds at most five entries, newest first.
A missing or unreadable recent file counts as an empty list.

## Keypad

The sixteen CHIP-8 keys map to the keyboard as follows:

| CHIP-8 key | Keyboard           |
|------------|--------------------|
| 1 2 3 C    | Keypad 1 2 3 4     |
| 4 5 6 D    | Q W E R            |
| 7 8 9 E    | A S D F            |
| A 0 B F    | Z X C V            |

Slash also acts as B, and keypad `*` also acts as F.

## Using it as a library

```python
from chipeight.cpu import CPU
from chipeight.display import Display
from chipeight.audio import Audio

cpu = CPU(Display(), Audio.silent())
with open("game.ch8", "rb") as rom:
    cpu.load_rom(rom.read())
keys = [False] * 16
cpu.step(keys)          # fetch, decode and execute one instruction
print(cpu.display.pixel(0, 0))
```

- `CPU(display=None, audio=None, rng=None)` builds a machine; without
  arguments it uses a windowless `Display` and a silent `Audio`. Registers,
  `i`, `pc`, `stack`, `memory`, `delay_timer` and `sound_timer` are plain
  attributes.
- `CPU.step(keys)` runs one instruction with a 16-entry keypad state, then
  ticks both timers. While an `FX0A` instruction waits for a key, `step` does
  nothing until a key is down.
- `CPU.step` raises `chipeight.cpu.Chip8Error` for an unknown opcode, stack
  overflow or underflow, a memory address outside 4 KiB, or a key index above
  15. `CPU.load_rom` raises it for a ROM that does not fit in memory.
- `Display(renderer=None)` holds the framebuffer. `Display.draw(sprite, x, y)`
  XORs a sprite with wrap-around and returns 1 on collision; `Display.pixel(x, y)`
  reports whether a pixel is lit; `Display.refresh()` passes the framebuffer to
  the renderer, such as `chipeight.display.PygameRenderer(title, scale)`.
- `Audio()` makes the tone with the pygame mixer and raises `RuntimeError` if
  the mixer cannot start; `Audio.silent()` keeps the play/pause state without
  sound.
- `chipeight.keypad.InputHandler.update(pressed)` takes the names of held
  keys (`"q"`, `"kp1"`, `"slash"`, `"escape"`, ...) and sets `get_keys()` and
  `running`.
- `chipeight.recent.RecentRoms` loads, adds to, clears and saves the recent list.

Each instruction and key press is logged at debug level through the standard
`logging` module.

## What it does not do

- There is no graphical launcher: ROMs are chosen on the command line, and
  there is no file picker, theme switch or recent-ROM menu window.
- Machine-code routines (`0NNN` other than `00E0` and `00EE`) are not run;
  they are logged and skipped.