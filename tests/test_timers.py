"""Tests for the delay and sound timers."""

import jax.numpy as jnp
from chipjax import tick_timers, sound_active


def _with_timers(state, delay, sound):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


def test_tick_decrements(fresh_state):
    state = tick_timers(_with_timers(fresh_state, 10, 3))
    assert state.delay_timer == 9
    assert state.sound_timer == 2


def test_tick_stops_at_zero(fresh_state):
    state = _with_timers(fresh_state, 1, 0)
    state = tick_timers(state)
    state = tick_timers(state)
    assert state.delay_timer == 0
    assert state.sound_timer == 0
    assert state.delay_timer.dtype == jnp.uint8


def test_sound_active_while_nonzero(fresh_state):
    state = _with_timers(fresh_state, 0, 2)
    assert sound_active(state)
    state = tick_timers(state)
    assert sound_active(state)
    state = tick_timers(state)
    assert not sound_active(state)
