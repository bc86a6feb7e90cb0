"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, SCREEN_WIDTH
from chipjax.logging import EmulatorLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state in modern mode."""
    return create_state().replace(modern_mode=True)


@pytest.fixture
def legacy_state():
    """Provide a fresh state in legacy mode."""
    return create_state().replace(modern_mode=False)


@pytest.fixture
def quiet_logger():
    """Logger that only reports errors."""
    return EmulatorLogger(log_level="ERROR", use_colors=False, show_timestamps=False)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x10, VF=1)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def pixel(state, x, y):
    """Whether the framebuffer pixel at (x, y) is on."""
    return bool(state.display[y * SCREEN_WIDTH + x] != 0)


def program(*words):
    """Assemble instruction words into big-endian ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
