"""Main CHIP-8 execution engine."""

from pathlib import Path
from typing import Union

import jax.numpy as jnp
from chip8vm.state import MachineState, as_u16, as_u8, check_memory_range
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.instructions.system import execute_clear_screen, execute_return, execute_unknown
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


DISPATCH = {
    Op.CLEAR_SCREEN: execute_clear_screen,
    Op.RETURN: execute_return,
    Op.JUMP: execute_jump,
    Op.CALL: execute_call,
    Op.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Op.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Op.SKIP_EQ_REG: execute_skip_if_equal_register,
    Op.LOAD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.COPY: execute_alu_operation,
    Op.OR: execute_alu_operation,
    Op.AND: execute_alu_operation,
    Op.XOR: execute_alu_operation,
    Op.ADD_REG: execute_alu_operation,
    Op.SUB_XY: execute_alu_operation,
    Op.SHIFT_RIGHT: execute_alu_operation,
    Op.SUB_YX: execute_alu_operation,
    Op.SHIFT_LEFT: execute_alu_operation,
    Op.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Op.LOAD_INDEX: execute_set_index,
    Op.JUMP_OFFSET: execute_jump_with_offset,
    Op.RANDOM: execute_random,
    Op.DRAW: execute_display,
    Op.SKIP_KEY: execute_skip_if_key,
    Op.SKIP_NOT_KEY: execute_skip_if_not_key,
    Op.LOAD_DELAY: execute_get_delay_timer,
    Op.WAIT_KEY: execute_wait_for_key,
    Op.SET_DELAY: execute_set_delay_timer,
    Op.SET_SOUND: execute_set_sound_timer,
    Op.ADD_INDEX: execute_add_to_index,
    Op.FONT: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.STORE_REGS: execute_store_registers,
    Op.LOAD_REGS: execute_load_registers,
    Op.UNKNOWN: execute_unknown,
}


def apply(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Apply an already decoded instruction."""
    return DISPATCH[instruction.op](state, instruction)


def execute(state: MachineState, instruction: int) -> MachineState:
    """Execute single CHIP-8 instruction."""
    return apply(state, decode(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a big-endian 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: MachineState) -> tuple[MachineState, int]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    check_memory_range(pc, 2)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=as_u16(pc + 2)), instruction


def step(state: MachineState) -> tuple[MachineState, DecodedInstruction]:
    """Fetch, decode and execute one instruction."""
    state, raw = fetch(state)
    instruction = decode(raw)
    return apply(state, instruction), instruction


def tick_timers(state: MachineState) -> MachineState:
    """Count both timers down by one, stopping at zero."""
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    return state.replace(
        delay_timer=as_u8(delay - 1 if delay > 0 else 0),
        sound_timer=as_u8(sound - 1 if sound > 0 else 0),
    )


def sound_active(state: MachineState) -> bool:
    """Whether the host should be producing a tone."""
    return int(state.sound_timer) > 0


def set_keypad(state: MachineState, keys) -> MachineState:
    """Replace the held-key state with the given logical keys (0x0-0xF)."""
    keypad = jnp.zeros_like(state.keypad)
    for key in keys:
        keypad = keypad.at[int(key) & 0xF].set(True)
    return state.replace(keypad=keypad)


def read_rom(filename: Union[str, Path]) -> bytes:
    """Read a ROM image from disk."""
    with open(filename, 'rb') as f:
        return f.read()
