"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipjax.addressing import register_index
from chipjax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, DISPLAY_SIZE, FLAG_REGISTER, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS, STACK_SIZE
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is a flat row-major buffer of SCREEN_WIDTH * SCREEN_HEIGHT pixels,
    each either PIXEL_ON or PIXEL_OFF.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros(DISPLAY_SIZE, dtype=jnp.uint32))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    awaiting_input: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    modern_mode: bool = field(pytree_node=False, default=True)


def create_state(rng: jax.Array = None, modern_mode: bool = True) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng, modern_mode=modern_mode)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def with_keypad(state: EmulatorState, keys) -> EmulatorState:
    """Replace the keypad snapshot with 16 key states."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def set_register(state: EmulatorState, index, value) -> EmulatorState:
    """Write an 8-bit value into a register, wrapping at 256."""
    return state.replace(V=state.V.at[register_index(index)].set(int(value) & 0xFF))


def set_flag(state: EmulatorState, value) -> EmulatorState:
    """Write VF."""
    return set_register(state, FLAG_REGISTER, value)
