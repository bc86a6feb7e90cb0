"""Masked access to CHIP-8 memory and registers.

Every instruction reaches memory through these helpers so that addresses are
always reduced to 12 bits and register numbers to 4 bits before indexing.
"""

import jax.numpy as jnp

from chipjax.constants import ADDRESS_MASK, NUM_REGISTERS


def mask_address(address) -> int:
    """Reduce an address to the 12-bit memory space."""
    return int(address) & ADDRESS_MASK


def register_index(index) -> int:
    """Reduce a register number to 0-15."""
    return int(index) & (NUM_REGISTERS - 1)


def _span(address, count: int) -> jnp.ndarray:
    return (int(address) + jnp.arange(count)) & ADDRESS_MASK


def read_byte(memory: jnp.ndarray, address) -> int:
    """Read one byte at a masked address."""
    return int(memory[mask_address(address)])


def read_bytes(memory: jnp.ndarray, address, count: int) -> jnp.ndarray:
    """Read `count` consecutive bytes, wrapping at the top of memory."""
    return memory[_span(address, count)]


def write_bytes(memory: jnp.ndarray, address, values) -> jnp.ndarray:
    """Write consecutive bytes starting at a masked address, wrapping at the top of memory."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    return memory.at[_span(address, values.shape[0])].set(values)
