"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.addressing import read_bytes
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, DISPLAY_SIZE, FLAG_REGISTER, PIXEL_ON, PIXEL_OFF

# Pre-computed row/column of every framebuffer cell
yy, xx = jnp.divmod(jnp.arange(DISPLAY_SIZE), SCREEN_WIDTH)

SPRITE_WIDTH = 8


def sprite_mask(memory: jnp.ndarray, index, x: int, y: int, height: int) -> jnp.ndarray:
    """Boolean framebuffer mask of the set bits of a sprite anchored at (x, y).

    The anchor is expected on screen already; rows and columns that run past
    the right or bottom edge are clipped rather than wrapped.
    """
    in_sprite = (xx >= x) & (xx < x + SPRITE_WIDTH) & (yy >= y) & (yy < y + height)

    rows = read_bytes(memory, index, max(height, 1))
    row_offset = jnp.clip(yy - y, 0, max(height, 1) - 1)
    col_offset = jnp.clip(xx - x, 0, SPRITE_WIDTH - 1)
    sprite_bytes = rows[row_offset].astype(jnp.int32)
    bits = (sprite_bytes >> (SPRITE_WIDTH - 1 - col_offset)) & 1
    return (bits == 1) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT

    sprite = sprite_mask(state.memory, state.I, sprite_x, sprite_y, instruction.n)
    lit = state.display != PIXEL_OFF
    collision = jnp.any(lit & sprite)

    new_display = jnp.where(lit ^ sprite, jnp.uint32(PIXEL_ON), jnp.uint32(PIXEL_OFF))
    return state.replace(
        display=new_display.astype(jnp.uint32),
        V=state.V.at[FLAG_REGISTER].set(collision.astype(jnp.uint8))
    )
