import random

import pytest

from chipeight.audio import Audio
from chipeight.cpu import CPU, Chip8Error
from chipeight.display import Display

NO_KEYS = (False,) * 16


def make_cpu(program: bytes) -> CPU:
    cpu = CPU(Display(), Audio.silent(), random.Random(1234))
    cpu.load_rom(program)
    return cpu


def run(cpu: CPU, steps: int, keys=NO_KEYS) -> None:
    for _ in range(steps):
        cpu.step(keys)


def keys_with(index: int) -> tuple[bool, ...]:
    return tuple(k == index for k in range(16))


def test_fontset_loaded_and_pc_starts_at_program():
    cpu = CPU()
    assert bytes(cpu.memory[0:5]) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
    assert cpu.pc == 0x200


def test_load_rom_places_bytes_at_0x200():
    cpu = make_cpu(b"\x12\x34\x56")
    assert bytes(cpu.memory[0x200:0x203]) == b"\x12\x34\x56"


def test_load_rom_too_big():
    cpu = CPU()
    cpu.load_rom(bytes(0x1000 - 0x200))
    with pytest.raises(Chip8Error, match="ROM is too big"):
        cpu.load_rom(bytes(0x1000 - 0x200 + 1))


def test_clear_screen():
    cpu = make_cpu(bytes([0xD0, 0x05, 0x00, 0xE0]))
    cpu.step(NO_KEYS)
    assert cpu.display.pixel(0, 0)
    cpu.step(NO_KEYS)
    assert not any(cpu.display.pixel(px, py) for px in range(64) for py in range(32))


def test_jump():
    cpu = make_cpu(bytes([0x13, 0x00]))
    cpu.step(NO_KEYS)
    assert cpu.pc == 0x300


def test_call_and_return():
    program = bytes([0x22, 0x04, 0x00, 0x00, 0x00, 0xEE])
    cpu = make_cpu(program)
    cpu.step(NO_KEYS)
    assert cpu.pc == 0x204
    assert cpu.stack == [0x202]
    cpu.step(NO_KEYS)
    assert cpu.pc == 0x202
    assert cpu.stack == []


def test_return_with_empty_stack():
    cpu = make_cpu(bytes([0x00, 0xEE]))
    with pytest.raises(Chip8Error, match="Stack underflow"):
        cpu.step(NO_KEYS)


def test_stack_overflow():
    cpu = make_cpu(bytes([0x22, 0x00]))
    run(cpu, 16)
    assert len(cpu.stack) == 16
    with pytest.raises(Chip8Error, match="Stack overflow"):
        cpu.step(NO_KEYS)


def test_machine_routine_is_ignored():
    cpu = make_cpu(bytes([0x01, 0x23]))
    cpu.step(NO_KEYS)
    assert cpu.pc == 0x202


@pytest.mark.parametrize(
    "program, skipped",
    [
        (bytes([0x60, 0x05, 0x30, 0x05]), True),
        (bytes([0x60, 0x05, 0x30, 0x06]), False),
        (bytes([0x60, 0x05, 0x40, 0x06]), True),
        (bytes([0x60, 0x05, 0x40, 0x05]), False),
        (bytes([0x60, 0x05, 0x50, 0x10]), False),
        (bytes([0x60, 0x00, 0x50, 0x10]), True),
        (bytes([0x60, 0x05, 0x90, 0x10]), True),
        (bytes([0x60, 0x00, 0x90, 0x10]), False),
    ],
)
def test_conditional_skips(program, skipped):
    cpu = make_cpu(program)
    run(cpu, 2)
    assert cpu.pc == (0x206 if skipped else 0x204)


def test_add_immediate_wraps():
    cpu = make_cpu(bytes([0x60, 0xFF, 0x70, 0x02]))
    run(cpu, 2)
    assert cpu.v[0] == 1
    assert cpu.v[0xF] == 0


def test_logic_ops():
    cpu = make_cpu(bytes([0x60, 0x0C, 0x61, 0x0A, 0x82, 0x00, 0x82, 0x11, 0x83, 0x00, 0x83, 0x12, 0x84, 0x00, 0x84, 0x13]))
    run(cpu, 8)
    assert cpu.v[2] == 0x0C | 0x0A
    assert cpu.v[3] == 0x0C & 0x0A
    assert cpu.v[4] == 0x0C ^ 0x0A


def test_add_registers_sets_carry():
    cpu = make_cpu(bytes([0x60, 0xFF, 0x61, 0xFF, 0x80, 0x14]))
    run(cpu, 3)
    assert cpu.v[0xF] == 1
    assert cpu.v[0] == 0xFE


def test_subtract_sets_not_borrow_flag():
    cpu = make_cpu(bytes([0x60, 0x01, 0x61, 0x02, 0x80, 0x15]))
    run(cpu, 3)
    assert cpu.v[0xF] == 0
    assert cpu.v[0] == 0xFF

    cpu = make_cpu(bytes([0x60, 0x01, 0x61, 0x02, 0x80, 0x17]))
    run(cpu, 3)
    assert cpu.v[0xF] == 1
    assert cpu.v[0] == 1


def test_shifts_report_dropped_bit():
    cpu = make_cpu(bytes([0x60, 0x81, 0x61, 0x81, 0x80, 0x06, 0x81, 0x0E]))
    run(cpu, 3)
    assert cpu.v[0xF] == 1
    assert cpu.v[0] == 0x40
    cpu.step(NO_KEYS)
    assert cpu.v[0xF] == 1
    assert cpu.v[1] == 0x02


@pytest.mark.parametrize("opcode", [0x8008, 0xE0FF, 0xF0FF])
def test_unknown_opcode(opcode):
    cpu = make_cpu(opcode.to_bytes(2, "big"))
    with pytest.raises(Chip8Error, match=f"Unknown opcode: {opcode:04X}"):
        cpu.step(NO_KEYS)


def test_set_index_and_jump_with_offset():
    cpu = make_cpu(bytes([0xA1, 0x23, 0x60, 0x10, 0xB3, 0x00]))
    run(cpu, 3)
    assert cpu.i == 0x123
    assert cpu.pc == 0x310


def test_random_is_masked():
    cpu = make_cpu(bytes([0xC0, 0x00, 0xC1, 0x0F]))
    cpu.v[0] = 0xAA
    run(cpu, 2)
    assert cpu.v[0] == 0
    assert cpu.v[1] & 0xF0 == 0


def test_draw_sets_collision_on_second_draw():
    cpu = make_cpu(bytes([0xD0, 0x05, 0xD0, 0x05]))
    cpu.step(NO_KEYS)
    assert cpu.v[0xF] == 0
    assert cpu.display.pixel(0, 0)
    cpu.step(NO_KEYS)
    assert cpu.v[0xF] == 1
    assert not cpu.display.pixel(0, 0)


def test_skip_on_key():
    cpu = make_cpu(bytes([0x60, 0x05, 0xE0, 0x9E]))
    run(cpu, 2, keys_with(5))
    assert cpu.pc == 0x206

    cpu = make_cpu(bytes([0x60, 0x05, 0xE0, 0xA1]))
    run(cpu, 2, keys_with(5))
    assert cpu.pc == 0x204


def test_key_register_out_of_range():
    cpu = make_cpu(bytes([0x60, 0x20, 0xE0, 0x9E]))
    cpu.step(NO_KEYS)
    with pytest.raises(Chip8Error):
        cpu.step(NO_KEYS)


def test_wait_for_keypress():
    cpu = make_cpu(bytes([0xF3, 0x0A, 0x60, 0x01]))
    cpu.step(NO_KEYS)
    pc = cpu.pc
    run(cpu, 3)
    assert cpu.pc == pc
    cpu.step(keys_with(7))
    assert cpu.v[3] == 7
    assert cpu.v[0] == 1
    assert cpu.waiting_register is None


def test_delay_timer_counts_down_to_zero():
    cpu = make_cpu(bytes([0x60, 0x03, 0xF0, 0x15, 0xF1, 0x07]) + bytes([0x12, 0x06]))
    run(cpu, 2)
    after_set = cpu.delay_timer
    assert after_set < cpu.v[0]
    cpu.step(NO_KEYS)
    assert cpu.v[1] == after_set
    run(cpu, 10)
    assert cpu.delay_timer == 0


def test_sound_timer_drives_audio():
    cpu = make_cpu(bytes([0x60, 0x02, 0xF0, 0x18, 0x12, 0x04]))
    run(cpu, 2)
    assert cpu.audio.playing
    run(cpu, 5)
    assert cpu.sound_timer == 0
    assert not cpu.audio.playing


def test_font_address():
    cpu = make_cpu(bytes([0x60, 0x01, 0xF0, 0x29]))
    run(cpu, 2)
    assert bytes(cpu.memory[cpu.i : cpu.i + 5]) == bytes([0x20, 0x60, 0x20, 0x20, 0x70])


def test_add_to_index():
    cpu = make_cpu(bytes([0xA3, 0x00, 0x60, 0x10, 0xF0, 0x1E]))
    run(cpu, 3)
    assert cpu.i == 0x310


def test_bcd():
    cpu = make_cpu(bytes([0x60, 123, 0xA3, 0x00, 0xF0, 0x33]))
    run(cpu, 3)
    assert list(cpu.memory[0x300:0x303]) == [1, 2, 3]


def test_store_and_load_registers_round_trip():
    cpu = make_cpu(bytes([0xA3, 0x00, 0xF3, 0x55, 0xF3, 0x65]))
    cpu.v[:4] = [9, 8, 7, 6]
    run(cpu, 2)
    assert list(cpu.memory[0x300:0x304]) == [9, 8, 7, 6]
    cpu.v[:4] = [0, 0, 0, 0]
    cpu.step(NO_KEYS)
    assert cpu.v[:4] == [9, 8, 7, 6]


def test_fetch_past_end_of_memory():
    cpu = make_cpu(bytes([0x1F, 0xFF]))
    cpu.step(NO_KEYS)
    with pytest.raises(Chip8Error):
        cpu.step(NO_KEYS)