"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chip8vm import Quirks, create_state


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def fixed_index_state():
    """State whose FX55/FX65 leave I unchanged."""
    return create_state(quirks=Quirks(increment_index=False))


@pytest.fixture
def in_place_shift_state():
    """State whose shifts operate on VX instead of VY."""
    return create_state(quirks=Quirks(shift_uses_vy=False))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=3, VF=1)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program(*words):
    """Assemble 16-bit instruction words into a big-endian ROM image."""
    return b"".join(word.to_bytes(2, "big") for word in words)
