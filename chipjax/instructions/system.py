"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_machine_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Call machine code routine; ignored by interpreters."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)
