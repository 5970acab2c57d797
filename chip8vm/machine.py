"""Stateful wrapper owning a single CHIP-8 machine."""

from pathlib import Path
from typing import Iterable, Optional, Union

import jax
import numpy as np

from chip8vm import emulator
from chip8vm.decode import DecodedInstruction
from chip8vm.keypad import Key
from chip8vm.logging import get_logger, run_with_progress
from chip8vm.stack import depth
from chip8vm.state import MachineState, Quirks, create_state


class Machine:
    """A CHIP-8 machine driven by a host loop.

    The host calls :meth:`execute_one` as often as it likes and
    :meth:`tick_timers` at 60 Hz, then reads :attr:`framebuffer` and
    :attr:`sound_active`. The machine has no clock of its own.

    Example:
        >>> machine = Machine(rom_bytes, seed=1)
        >>> machine.set_keys([Key.KEY_5])
        >>> machine.execute_one()
        >>> machine.tick_timers()
    """

    def __init__(self, rom: bytes, seed: int = 0, quirks: Quirks = Quirks()):
        self.state: MachineState = create_state(rom, jax.random.PRNGKey(seed), quirks)
        self.instruction_count = 0

    @classmethod
    def from_file(cls, filename: Union[str, Path], **kwargs) -> "Machine":
        """Load a ROM file and build a machine around it."""
        rom = emulator.read_rom(filename)
        get_logger().info(f"Loaded {filename} ({len(rom)} bytes)")
        return cls(rom, **kwargs)

    # Per-cycle operations

    def execute_one(self) -> DecodedInstruction:
        """Run one fetch-decode-execute step and return what was decoded."""
        self.state, instruction = emulator.step(self.state)
        self.instruction_count += 1
        return instruction

    def tick_timers(self):
        """Count the delay and sound timers down once."""
        self.state = emulator.tick_timers(self.state)

    def run(self, cycles: int, ipf: int = 10, progress: bool = False):
        """Execute ``cycles`` instructions, ticking timers every ``ipf`` of them.

        Raises:
            ValueError: If ``ipf`` is less than 1.
        """
        if ipf < 1:
            raise ValueError(f"ipf must be at least 1, got {ipf}")

        def _cycle(i: int):
            self.execute_one()
            if (i + 1) % ipf == 0:
                self.tick_timers()

        if progress:
            run_with_progress(_cycle, cycles, desc="Emulating")
        else:
            for i in range(cycles):
                _cycle(i)

    # Input

    def set_keys(self, keys: Iterable[int]):
        """Set which logical keys are currently held."""
        self.state = emulator.set_keypad(self.state, keys)

    def is_key_held(self, key: int) -> bool:
        return bool(self.state.keypad[int(key) & 0xF])

    def held_key(self) -> Optional[Key]:
        """The single held key, or None when zero or several keys are held."""
        held = np.flatnonzero(np.asarray(self.state.keypad))
        if held.size != 1:
            return None
        return Key(int(held[0]))

    # Observation

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only (32, 64) boolean view of the display, indexed [row, column]."""
        pixels = np.array(self.state.display, dtype=np.bool_)
        pixels.flags.writeable = False
        return pixels

    @property
    def sound_active(self) -> bool:
        return emulator.sound_active(self.state)

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(int(v) for v in self.state.V)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def stack_depth(self) -> int:
        return depth(self.state.stack)
