"""Tests for the stateful Machine wrapper."""

import pytest
from chip8vm import Key, Machine, Op, Quirks, StackUnderflowError
from chip8vm.constants import PROGRAM_START
from conftest import program


class TestMachine:

    def test_execute_one(self):
        machine = Machine(program(0x6A2B, 0xA300))
        instruction = machine.execute_one()
        assert instruction.op == Op.LOAD_IMM
        assert machine.registers[0xA] == 0x2B
        assert machine.pc == PROGRAM_START + 2

        machine.execute_one()
        assert machine.index == 0x300
        assert machine.instruction_count == 2

    def test_framebuffer_is_read_only(self):
        # Draw the "0" glyph at (0, 0).
        machine = Machine(program(0xF029, 0xD015))
        machine.execute_one()
        machine.execute_one()

        framebuffer = machine.framebuffer
        assert framebuffer.shape == (32, 64)
        assert framebuffer[0, 0]
        with pytest.raises(ValueError):
            framebuffer[0, 0] = False

    def test_sound_active_follows_timer(self):
        machine = Machine(program(0x6002, 0xF018))
        machine.execute_one()
        machine.execute_one()
        assert machine.sound_active
        machine.tick_timers()
        assert machine.sound_active
        machine.tick_timers()
        assert not machine.sound_active
        machine.tick_timers()
        assert machine.sound_timer == 0

    def test_delay_timer_loop(self):
        # DT = 3; loop: V1 = DT; skip if V1 == 0; jump loop; V2 = 1; halt
        machine = Machine(program(0x6003, 0xF015, 0xF107, 0x3100, 0x1204, 0x6201, 0x120C))
        machine.run(40, ipf=3)
        assert machine.delay_timer == 0
        assert machine.registers[2] == 1

    @pytest.mark.parametrize("ipf", [0, -1])
    def test_run_rejects_non_positive_ipf(self, ipf):
        machine = Machine(program(0x1200))
        with pytest.raises(ValueError):
            machine.run(5, ipf=ipf)
        assert machine.instruction_count == 0

    def test_keys(self):
        machine = Machine(program(0xF30A))
        assert machine.held_key() is None

        machine.set_keys([Key.KEY_9])
        assert machine.is_key_held(Key.KEY_9)
        assert not machine.is_key_held(Key.KEY_8)
        assert machine.held_key() is Key.KEY_9

        machine.set_keys([Key.KEY_9, Key.KEY_2])
        assert machine.held_key() is None

        machine.set_keys([Key.KEY_2])
        machine.execute_one()
        assert machine.registers[3] == 2

    def test_quirks_are_forwarded(self):
        machine = Machine(program(0xA300, 0xF055), quirks=Quirks(increment_index=False))
        machine.run(2)
        assert machine.index == 0x300

    def test_fatal_fault_propagates(self):
        machine = Machine(program(0x00EE))
        with pytest.raises(StackUnderflowError):
            machine.execute_one()

    def test_stack_depth(self):
        machine = Machine(program(0x2204, 0x0000, 0x2208, 0x0000, 0x00EE))
        machine.execute_one()
        machine.execute_one()
        assert machine.stack_depth == 2

    def test_run_with_progress(self):
        machine = Machine(program(0x7001, 0x1200))
        machine.run(20, progress=True)
        assert machine.registers[0] == 10

    def test_from_file(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x6042))
        machine = Machine.from_file(rom, seed=3)
        machine.execute_one()
        assert machine.registers[0] == 0x42

    def test_independent_instances(self):
        a = Machine(program(0x6001))
        b = Machine(program(0x6002))
        a.execute_one()
        assert b.registers[0] == 0
        b.execute_one()
        assert a.registers[0] == 1
        assert b.registers[0] == 2
