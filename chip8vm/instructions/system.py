"""CHIP-8 system instructions (0x0xxx) and unknown-opcode handling."""

import jax.numpy as jnp
from chip8vm.state import MachineState, as_u16
from chip8vm.decode import DecodedInstruction
from chip8vm.logging import get_logger
from chip8vm.stack import pop


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack, int(state.pc) - 2)
    return state.replace(stack=stack, pc=as_u16(address))


def execute_unknown(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Report an undecodable instruction and leave the state untouched."""
    address = (int(state.pc) - 2) & 0xFFFF
    get_logger().warning(f"Unknown opcode 0x{instruction.raw:04X} at 0x{address:03X}, skipped")
    return state
