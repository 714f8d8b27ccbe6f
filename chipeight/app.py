"""Command-line front end: pick a ROM, open the emulator window, remember recent ROMs."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

from chipeight.audio import Audio
from chipeight.cpu import CPU, Chip8Error
from chipeight.display import PygameRenderer
from chipeight.keypad import InputHandler
from chipeight.recent import DEFAULT_FILE, RecentRoms

CPU_CYCLES_PER_FRAME = 8
FRAME_SECONDS = 0.016
SCALE_CHOICES = ("8x (512x256)", "10x (640x320)", "12x (768x384)")
_SCALES = (8, 10, 12)


def scale_for_choice(index: int) -> int:
    """Return the pixel scale for a display-scale choice; unknown choices give 8."""
    if 0 <= index < len(_SCALES):
        return _SCALES[index]
    return _SCALES[0]


def _pressed_key_names(pygame) -> list[str]:
    keycodes = {
        "kp1": pygame.K_KP1,
        "kp2": pygame.K_KP2,
        "kp3": pygame.K_KP3,
        "kp4": pygame.K_KP4,
        "q": pygame.K_q,
        "w": pygame.K_w,
        "e": pygame.K_e,
        "r": pygame.K_r,
        "a": pygame.K_a,
        "s": pygame.K_s,
        "d": pygame.K_d,
        "f": pygame.K_f,
        "z": pygame.K_z,
        "x": pygame.K_x,
        "c": pygame.K_c,
        "v": pygame.K_v,
        "slash": pygame.K_SLASH,
        "kp_multiply": pygame.K_KP_MULTIPLY,
        "escape": pygame.K_ESCAPE,
    }
    state = pygame.key.get_pressed()
    return [name for name, code in keycodes.items() if state[code]]


def start_emulator(rom_path: str | Path, scale: int, enable_audio: bool) -> None:
    """Run a ROM in a window until it is closed or Escape is pressed."""
    rom_path = Path(rom_path)
    rom = rom_path.read_bytes()
    cpu = CPU()
    cpu.load_rom(rom)

    import pygame

    renderer = PygameRenderer(f"CHIP-8: {rom_path.name}", scale)
    try:
        cpu.display.renderer = renderer
        cpu.audio = Audio() if enable_audio else Audio.silent()
        input_handler = InputHandler()
        last_frame = time.monotonic()
        while input_handler.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    input_handler.running = False
                    cpu.audio.pause()
            input_handler.update(_pressed_key_names(pygame))
            for _ in range(CPU_CYCLES_PER_FRAME):
                cpu.step(input_handler.get_keys())
            elapsed = time.monotonic() - last_frame
            if elapsed < FRAME_SECONDS:
                time.sleep(FRAME_SECONDS - elapsed)
            last_frame = time.monotonic()
    finally:
        cpu.audio.pause()
        renderer.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipeight", description="CHIP-8 emulator")
    parser.add_argument("rom", nargs="?", help="path of a .ch8 ROM to run")
    parser.add_argument(
        "-s",
        "--scale",
        type=int,
        default=0,
        choices=range(len(SCALE_CHOICES)),
        help="display scale: "
        + ", ".join(f"{index}={label}" for index, label in enumerate(SCALE_CHOICES)),
    )
    parser.add_argument("--no-audio", action="store_true", help="run without sound")
    parser.add_argument(
        "-r", "--recent", type=int, metavar="N", help="run the Nth recent ROM (0 is newest)"
    )
    parser.add_argument("--list-recent", action="store_true", help="show recent ROMs")
    parser.add_argument("--clear-recent", action="store_true", help="forget recent ROMs")
    parser.add_argument(
        "--recent-file", default=DEFAULT_FILE, help="where the recent ROM list is kept"
    )
    return parser


def _run(rom: str, args: argparse.Namespace) -> bool:
    try:
        start_emulator(rom, scale_for_choice(args.scale), not args.no_audio)
    except (Chip8Error, OSError, RuntimeError) as exc:
        print(f"Emulator error: {exc}")
        return False
    print("Emulator closed successfully")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    recent = RecentRoms.load(args.recent_file)
    acted = False

    if args.clear_recent:
        try:
            recent.clear()
        except OSError as exc:
            print(f"Could not clear recent ROMs: {exc}")
            return 1
        print("Recent ROMs cleared")
        acted = True

    if args.list_recent:
        for index, rom in enumerate(recent.roms):
            print(f"{index}: {rom}")
        acted = True

    if args.recent is not None:
        if not 0 <= args.recent < len(recent.roms):
            print(f"No recent ROM number {args.recent}")
            return 1
        return 0 if _run(recent.roms[args.recent], args) else 1

    if args.rom is not None:
        if not _run(args.rom, args):
            return 1
        try:
            recent.add(str(Path(args.rom)))
        except OSError:
            pass
        return 0

    if not acted:
        parser.error("select a ROM to start")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())