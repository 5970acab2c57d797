"""Tests for ALU operations (8xxx)."""

import pytest
from chip8vm import execute
from chip8vm.instructions.alu import alu_add, alu_sub_xy, alu_sub_yx
from conftest import set_registers


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x0F)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0xF0

    @pytest.mark.parametrize("instruction", [0x8120, 0x8121, 0x8122, 0x8123])
    def test_logic_ops_leave_flag_alone(self, fresh_state, instruction):
        """8XY0-8XY3 never write VF."""
        state = set_registers(fresh_state, V1=0x0F, V2=0xF0, VF=0x5A)

        state = execute(state, instruction)

        assert state.V[15] == 0x5A


class TestAddition:
    """Test 8XY4 carry semantics."""

    def test_add_no_carry(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10, V2=0x20)

        state = execute(state, 0x8124)

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_add_with_carry(self, fresh_state):
        state = set_registers(fresh_state, V1=0xFF, V2=0x02)

        state = execute(state, 0x8124)

        assert state.V[1] == 0x01
        assert state.V[15] == 1

    def test_add_carry_all_values(self):
        """Carry iff a + b > 255 and result is (a + b) mod 256."""
        for a in range(256):
            for b in range(256):
                assert alu_add(a, b) == ((a + b) % 256, int(a + b > 255)), (a, b)

    @pytest.mark.parametrize("a, b", [(0, 0), (0x80, 0x7F), (0x80, 0x80), (0xFF, 0xFF)])
    def test_add_carry_boundaries(self, fresh_state, a, b):
        state = set_registers(fresh_state, V1=a, V2=b, VF=0xAA)
        state = execute(state, 0x8124)
        assert int(state.V[1]) == (a + b) % 256
        assert int(state.V[15]) == int(a + b > 255)

    def test_add_into_flag_register_keeps_flag(self, fresh_state):
        """8FY4 - VF ends up holding the carry, not the sum."""
        state = set_registers(fresh_state, VF=0xFF, V2=0x01)

        state = execute(state, 0x8F24)

        assert state.V[15] == 1

    def test_add_immediate_has_no_flag(self, fresh_state):
        """7XNN wraps without touching VF."""
        state = set_registers(fresh_state, V3=0xFF, VF=0x07)

        state = execute(state, 0x7302)

        assert state.V[3] == 0x01
        assert state.V[15] == 0x07


class TestSubtraction:
    """Test 8XY5 / 8XY7 borrow semantics (VF = 0 on borrow)."""

    def test_sub_xy_no_borrow(self, fresh_state):
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_sub_xy_borrow(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8125)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0

    def test_sub_xy_equal_values(self, fresh_state):
        state = set_registers(fresh_state, V1=0x42, V2=0x42)

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 1

    def test_sub_all_values(self):
        for a in range(256):
            for b in range(256):
                assert alu_sub_xy(a, b) == ((a - b) % 256, int(a >= b)), (a, b)
                assert alu_sub_yx(a, b) == ((b - a) % 256, int(b >= a)), (a, b)

    @pytest.mark.parametrize("a, b", [(0, 1), (1, 0), (0xFF, 0xFF), (0x00, 0xFF)])
    def test_sub_xy_boundaries(self, fresh_state, a, b):
        state = set_registers(fresh_state, V1=a, V2=b)
        state = execute(state, 0x8125)
        assert int(state.V[1]) == (a - b) % 256
        assert int(state.V[15]) == int(a >= b)

    def test_sub_yx_no_borrow(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_sub_yx_borrow(self, fresh_state):
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestShifts:
    """Test 8XY6 / 8XYE."""

    def test_shift_right_all_values(self, fresh_state):
        """VF = pre-shift bit 0 of VY, VX = VY >> 1."""
        for value in range(256):
            state = set_registers(fresh_state, V1=0x55, V2=value)
            state = execute(state, 0x8126)
            assert int(state.V[1]) == value >> 1, value
            assert int(state.V[15]) == value & 1, value

    def test_shift_left_all_values(self, fresh_state):
        """VF = pre-shift bit 7 of VY, VX = (VY << 1) mod 256."""
        for value in range(256):
            state = set_registers(fresh_state, V1=0x55, V2=value)
            state = execute(state, 0x812E)
            assert int(state.V[1]) == (value << 1) & 0xFF, value
            assert int(state.V[15]) == value >> 7, value

    def test_shift_leaves_source_untouched(self, fresh_state):
        state = set_registers(fresh_state, V2=0x81)

        state = execute(state, 0x8126)

        assert state.V[2] == 0x81

    def test_shift_right_in_place_quirk(self, in_place_shift_state):
        state = set_registers(in_place_shift_state, V1=0x03, V2=0xF0)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x01
        assert state.V[15] == 1

    def test_shift_left_in_place_quirk(self, in_place_shift_state):
        state = set_registers(in_place_shift_state, V1=0x81, V2=0x00)

        state = execute(state, 0x812E)

        assert state.V[1] == 0x02
        assert state.V[15] == 1

    def test_shift_into_flag_register(self, fresh_state):
        """8FY6 - the shifted-out bit wins over the result."""
        state = set_registers(fresh_state, V2=0x02)

        state = execute(state, 0x8F26)

        assert state.V[15] == 0


class TestUndefinedALU:
    """Unassigned 8XYN sub-opcodes are reported and skipped."""

    @pytest.mark.parametrize("instruction", [0x8128, 0x8129, 0x812A, 0x812B, 0x812C, 0x812D, 0x812F])
    def test_undefined_leaves_registers(self, fresh_state, instruction):
        state = set_registers(fresh_state, V1=0x12, V2=0x34, VF=0x56)

        new_state = execute(state, instruction)

        assert (new_state.V == state.V).all()
        assert new_state.pc == state.pc
