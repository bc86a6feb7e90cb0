"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState, set_register
from chipjax.decode import DecodedInstruction
from chipjax.addressing import read_bytes, write_bytes
from chipjax.constants import FONT_START, FONT_GLYPH_SIZE


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, instruction.x, state.delay_timer)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register (16-bit, VF unaffected)."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key down the program counter is rolled back onto this instruction
    and the machine reports itself as awaiting input. Otherwise the lowest
    numbered pressed key is stored in VX.
    """
    if not bool(jnp.any(state.keypad)):
        return state.replace(
            pc=jnp.asarray((int(state.pc) - 2) & 0xFFFF, dtype=jnp.uint16),
            awaiting_input=jnp.asarray(True),
        )

    pressed_key = int(jnp.argmax(state.keypad))
    state = set_register(state, instruction.x, pressed_key)
    return state.replace(awaiting_input=jnp.asarray(False))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(state.V[instruction.x]) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return state.replace(memory=write_bytes(state.memory, state.I, digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    registers = state.V[:instruction.x + 1]
    return state.replace(memory=write_bytes(state.memory, state.I, registers))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    values = read_bytes(state.memory, state.I, count)
    return state.replace(V=state.V.at[:count].set(values))
