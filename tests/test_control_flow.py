"""Tests for control flow instructions."""

import jax.numpy as jnp
import pytest
from chipjax import execute, step, StackOverflowError, STACK_SIZE
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = set_registers(fresh_state, V0=0x10, V3=0x99)

        state = execute(state, 0xB300)

        assert state.pc == 0x310

    def test_jump_with_offset_ignores_vx(self, fresh_state):
        """BXNN uses V0 regardless of the X nibble."""
        state = set_registers(fresh_state, V0=0x02, V2=0x40)

        state = execute(state, 0xB234)

        assert state.pc == 0x236


class TestSubroutines:
    """Test CALL and RET."""

    def test_call_pushes_return_address(self, fresh_state):
        """2NNN - Pushes the current pc and jumps."""
        state = fresh_state.replace(pc=jnp.asarray(0x202, dtype=jnp.uint16))

        state = execute(state, 0x2400)

        assert state.pc == 0x400
        assert state.stack.pointer == 1
        assert state.stack.data[0] == 0x202

    def test_call_return_round_trip(self, fresh_state):
        """CALL at P then RET resumes at P + 2 with the stack depth restored."""
        state = fresh_state.replace(
            memory=fresh_state.memory
            .at[0x200].set(0x23).at[0x201].set(0x00)   # CALL 0x300
            .at[0x300].set(0x00).at[0x301].set(0xEE)   # RET
        )

        state, _ = step(state)
        assert state.pc == 0x300
        assert state.stack.pointer == 1

        state, _ = step(state)
        assert state.pc == 0x202
        assert state.stack.pointer == 0

    def test_nested_calls(self, fresh_state):
        state = fresh_state
        for target in (0x300, 0x400, 0x500):
            state = execute(state, 0x2000 | target)
        assert state.stack.pointer == 3
        assert [int(a) for a in state.stack.data[:3]] == [0x200, 0x300, 0x400]

    def test_call_overflow_raises(self, fresh_state):
        """A seventeenth nested CALL faults without touching the state."""
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)
        assert state.stack.pointer == STACK_SIZE

        with pytest.raises(StackOverflowError):
            execute(state, 0x2300)
        assert state.stack.pointer == STACK_SIZE
        assert state.pc == 0x300


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = int(state.pc)

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = int(state.pc)

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = int(state.pc)

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = int(state.pc)

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = int(state.pc)

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = int(state.pc)

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = set_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = int(state.pc)

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = set_registers(fresh_state, V7=0xAA, V8=0xAA)
        initial_pc = int(state.pc)

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    @pytest.mark.parametrize("pressed, instruction, skips", [
        (True, 0xE39E, True),
        (False, 0xE39E, False),
        (True, 0xE3A1, False),
        (False, 0xE3A1, True),
    ])
    def test_key_skips(self, fresh_state, pressed, instruction, skips):
        """EX9E / EXA1 - Skip on the state of key VX."""
        state = set_registers(fresh_state, V3=0xB)
        state = state.replace(keypad=state.keypad.at[0xB].set(pressed))
        initial_pc = int(state.pc)

        state = execute(state, instruction)

        assert state.pc == initial_pc + (2 if skips else 0)

    def test_key_skip_masks_register(self, fresh_state):
        """Key numbers above 0xF use their low nibble."""
        state = set_registers(fresh_state, V3=0x1B)
        state = state.replace(keypad=state.keypad.at[0xB].set(True))

        state = execute(state, 0xE39E)

        assert state.pc == 0x202
