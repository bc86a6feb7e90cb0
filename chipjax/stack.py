"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipjax.constants import STACK_SIZE
from chipjax.errors import StackOverflowError, StackUnderflowError
from chipjax.state import StackState


def push(stack: StackState, address) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"Call stack full ({STACK_SIZE} frames) pushing 0x{int(address):03X}")
    new_data = stack.data.at[stack.pointer].set(int(address) & 0xFFFF)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflowError("Return with an empty call stack")
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
