"""CHIP-8 interpreter package."""

from chip8vm.state import MachineState, Quirks, StackState, create_state
from chip8vm.emulator import execute, fetch, step, tick_timers, sound_active, set_keypad, read_rom
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.machine import Machine
from chip8vm.keypad import DEFAULT_LAYOUT, Key, KeyMap
from chip8vm.errors import (
    Chip8Error, KeyMapError, MachineFault, MemoryAccessError, RomTooLargeError,
    StackOverflowError, StackUnderflowError,
)
from chip8vm.constants import *

__all__ = [
    "MachineState",
    "Quirks",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "sound_active",
    "set_keypad",
    "read_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "Machine",
    "Key",
    "KeyMap",
    "DEFAULT_LAYOUT",
    "Chip8Error",
    "KeyMapError",
    "MachineFault",
    "MemoryAccessError",
    "RomTooLargeError",
    "StackOverflowError",
    "StackUnderflowError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
