"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState, as_u16, check_memory_range
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_GLYPH_SIZE, FONT_START


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I register (16-bit wrap, VF untouched)."""
    return state.replace(I=as_u16(int(state.I) + int(state.V[instruction.x])))


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Wait for key press.

    Rewinds PC onto this instruction until exactly one key is held, so the
    host loop keeps running and can feed new key state between steps.
    """
    pressed = jnp.flatnonzero(state.keypad)
    if pressed.size != 1:
        return state.replace(pc=as_u16(int(state.pc) - 2))
    return state.replace(V=state.V.at[instruction.x].set(int(pressed[0])))


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    return state.replace(I=as_u16(FONT_START + digit * FONT_GLYPH_SIZE))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    index = int(state.I)
    check_memory_range(index, 3)

    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[index:index + 3].set(digits))


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    index = int(state.I)
    check_memory_range(index, count)

    new_memory = state.memory.at[index:index + count].set(state.V[:count])
    if state.quirks.increment_index:
        return state.replace(memory=new_memory, I=as_u16(index + count))
    return state.replace(memory=new_memory)


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    index = int(state.I)
    check_memory_range(index, count)

    new_V = state.V.at[:count].set(state.memory[index:index + count])
    if state.quirks.increment_index:
        return state.replace(V=new_V, I=as_u16(index + count))
    return state.replace(V=new_V)
