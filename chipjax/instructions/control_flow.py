"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.stack import push


def _skip(state: EmulatorState) -> EmulatorState:
    return state.replace(pc=jnp.asarray((int(state.pc) + 2) & 0xFFFF, dtype=jnp.uint16))


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return _skip(state)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = instruction.nnn + int(state.V[0])
    return state.replace(pc=jnp.asarray(jump_address, dtype=jnp.uint16))
