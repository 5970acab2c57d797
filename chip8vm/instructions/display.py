"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import MachineState, check_memory_range
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Bit 7 of a sprite byte is its leftmost pixel.
_BIT_SHIFTS = jnp.arange(SPRITE_WIDTH - 1, -1, -1, dtype=jnp.uint8)


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    The origin wraps onto the screen, the sprite itself is clipped at the
    right and bottom edges.
    """
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT
    index = int(state.I)
    if instruction.n == 0:
        return state.replace(V=state.V.at[FLAG_REGISTER].set(0))
    check_memory_range(index, instruction.n)

    rows = min(instruction.n, SCREEN_HEIGHT - sprite_y)
    cols = min(SPRITE_WIDTH, SCREEN_WIDTH - sprite_x)

    sprite_bytes = state.memory[index:index + rows]
    sprite = ((sprite_bytes[:, None] >> _BIT_SHIFTS[None, :cols]) & 1).astype(jnp.bool_)

    region = state.display[sprite_y:sprite_y + rows, sprite_x:sprite_x + cols]
    collision = jnp.any(region & sprite)

    return state.replace(
        display=state.display.at[sprite_y:sprite_y + rows, sprite_x:sprite_x + cols].set(region ^ sprite),
        V=state.V.at[FLAG_REGISTER].set(collision.astype(jnp.uint8))
    )
