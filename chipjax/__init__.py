"""CHIP-8 virtual machine package."""

from chipjax.config import Dialect, WrapMode
from chipjax.state import MachineState, StackState, create_state, reset
from chipjax.emulator import (
    execute, fetch, step, tick_timers, run_cycles, run_cycles_with_progress,
    load_rom, load_rom_file, read_rom,
)
from chipjax.decode import DecodedInstruction, decode, is_legal
from chipjax.constants import *
from chipjax.errors import Chip8Error, IllegalOpcode, MachineNotPowered, raise_for_fault
from chipjax.machine import Machine
from chipjax.rendering import display_to_rgb, create_color_scheme, save_frame

__all__ = [
    "Dialect",
    "WrapMode",
    "MachineState",
    "StackState",
    "create_state",
    "reset",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_cycles",
    "run_cycles_with_progress",
    "load_rom",
    "load_rom_file",
    "read_rom",
    "DecodedInstruction",
    "decode",
    "is_legal",
    "Chip8Error",
    "IllegalOpcode",
    "MachineNotPowered",
    "raise_for_fault",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "create_color_scheme",
    "save_frame",
]
