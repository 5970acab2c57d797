"""CHIP-8 machine state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    FONT_DATA, FONT_START, MAX_ROM_SIZE, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    PROGRAM_START, SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)
from chip8vm.errors import MemoryAccessError, RomTooLargeError


@dataclass(frozen=True)
class Quirks:
    """Behavioural choices where historical interpreters disagree.

    Attributes:
        increment_index: FX55/FX65 leave I pointing past the last register
            transferred (I += X + 1), as the original COSMAC VIP did.
        shift_uses_vy: 8XY6/8XYE shift VY into VX. When False, VX is
            shifted in place and VY is ignored.
    """
    increment_index: bool = True
    shift_uses_vy: bool = True


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class MachineState(PyTreeNode):
    """Main CHIP-8 machine state.

    ``display`` is indexed ``[row, column]``.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(
    rom: bytes = b"",
    rng: Optional[jax.Array] = None,
    quirks: Quirks = Quirks(),
) -> MachineState:
    """Create initial machine state with font data and ROM loaded.

    Args:
        rom: Raw ROM image, copied to memory at ``PROGRAM_START``.
        rng: PRNG key feeding CXNN. Defaults to ``PRNGKey(0)``.
        quirks: Behavioural quirks for this machine.

    Raises:
        RomTooLargeError: If ``rom`` does not fit in memory.
    """
    if len(rom) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom), MAX_ROM_SIZE)
    if rng is None:
        rng = jax.random.PRNGKey(0)

    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)
    if rom:
        rom_array = jnp.array(list(rom), dtype=jnp.uint8)
        memory = memory.at[PROGRAM_START:PROGRAM_START + len(rom)].set(rom_array)

    return MachineState(rng=rng, memory=memory, quirks=quirks)


def as_u8(value) -> jnp.ndarray:
    """Wrap an integer to a uint8 scalar."""
    return jnp.asarray(int(value) & 0xFF, dtype=jnp.uint8)


def as_u16(value) -> jnp.ndarray:
    """Wrap an integer to a uint16 scalar."""
    return jnp.asarray(int(value) & 0xFFFF, dtype=jnp.uint16)


def check_memory_range(address: int, length: int) -> None:
    """Raise MemoryAccessError unless ``[address, address + length)`` is in memory."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryAccessError(address, length)
