"""CHIP-8 delay and sound timers.

Both timers count down at a fixed external rate (traditionally 60 Hz) that is
independent of instruction throughput; callers tick them from their own clock.
"""

import jax.numpy as jnp
from chipjax.state import EmulatorState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement each nonzero timer by one."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )


def sound_active(state: EmulatorState) -> bool:
    """The buzzer sounds exactly while the sound timer is nonzero."""
    return bool(state.sound_timer != 0)
