"""Main CHIP-8 emulator execution engine."""

import enum
import os

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction, Mnemonic, decode
from chipjax.constants import PROGRAM_START, MAX_ROM_SIZE
from chipjax.addressing import read_byte
from chipjax.errors import RomReadError, RomTooLargeError, UnknownOpcodeError
from chipjax.instructions.system import no_op, execute_machine_call, execute_clear_screen, execute_return
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_pressed, execute_skip_if_key_not_pressed
)
from chipjax.instructions.alu import execute_alu_operation
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


HANDLERS = {
    Mnemonic.SYS: execute_machine_call,
    Mnemonic.CLS: execute_clear_screen,
    Mnemonic.RET: execute_return,
    Mnemonic.JP: execute_jump,
    Mnemonic.CALL: execute_call,
    Mnemonic.SE_IMM: execute_skip_if_equal_immediate,
    Mnemonic.SNE_IMM: execute_skip_if_not_equal_immediate,
    Mnemonic.SE_REG: execute_skip_if_equal_register,
    Mnemonic.LD_IMM: execute_set,
    Mnemonic.ADD_IMM: execute_add,
    Mnemonic.LD_REG: execute_alu_operation,
    Mnemonic.OR: execute_alu_operation,
    Mnemonic.AND: execute_alu_operation,
    Mnemonic.XOR: execute_alu_operation,
    Mnemonic.ADD_REG: execute_alu_operation,
    Mnemonic.SUB: execute_alu_operation,
    Mnemonic.SHR: execute_alu_operation,
    Mnemonic.SUBN: execute_alu_operation,
    Mnemonic.SHL: execute_alu_operation,
    Mnemonic.SNE_REG: execute_skip_if_not_equal_register,
    Mnemonic.LD_I: execute_set_index,
    Mnemonic.JP_V0: execute_jump_with_offset,
    Mnemonic.RND: execute_random,
    Mnemonic.DRW: execute_display,
    Mnemonic.SKP: execute_skip_if_key_pressed,
    Mnemonic.SKNP: execute_skip_if_key_not_pressed,
    Mnemonic.LD_VX_DT: execute_get_delay_timer,
    Mnemonic.LD_VX_K: execute_wait_for_key,
    Mnemonic.LD_DT_VX: execute_set_delay_timer,
    Mnemonic.LD_ST_VX: execute_set_sound_timer,
    Mnemonic.ADD_I: execute_add_to_index,
    Mnemonic.LD_F: execute_font_character,
    Mnemonic.LD_B: execute_bcd_conversion,
    Mnemonic.LD_MEM_VX: execute_store_registers,
    Mnemonic.LD_VX_MEM: execute_load_registers,
    Mnemonic.UNKNOWN: no_op,
}


class StepStatus(enum.Enum):
    """Outcome of a single fetch/execute step."""
    ADVANCED = "advanced"
    PARKED = "parked"
    UNKNOWN_OPCODE = "unknown_opcode"


def execute(state: EmulatorState, instruction: int | DecodedInstruction) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)
    return HANDLERS[instruction.mnemonic](state, instruction)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into a 16-bit word."""
    return (high << 8) | low


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    instruction = _pack_u16(read_byte(state.memory, pc), read_byte(state.memory, pc + 1))
    return state.replace(pc=jnp.asarray((pc + 2) & 0xFFFF, dtype=jnp.uint16)), instruction


def step(state: EmulatorState, strict: bool = False) -> tuple[EmulatorState, StepStatus]:
    """Fetch and execute one instruction.

    Returns the new state and whether the machine advanced, is parked on a key
    wait, or skipped over an unknown opcode. With `strict` an unknown opcode
    raises UnknownOpcodeError instead.
    """
    pc = int(state.pc)
    next_state, instruction = fetch(state)
    decoded = decode(instruction)

    if decoded.mnemonic is Mnemonic.UNKNOWN:
        if strict:
            raise UnknownOpcodeError(pc, instruction)
        return next_state, StepStatus.UNKNOWN_OPCODE

    next_state = execute(next_state, decoded)
    if decoded.mnemonic is Mnemonic.LD_VX_K and bool(next_state.awaiting_input):
        return next_state, StepStatus.PARKED
    return next_state, StepStatus.ADVANCED


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy ROM data into CHIP-8 memory starting at 0x200.

    The load is rejected before any write if the data is empty or would run
    past the top of memory.
    """
    if len(rom_data) == 0:
        raise RomReadError("ROM contains no data")
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str | os.PathLike) -> bytes:
    """Read a ROM image from disk."""
    try:
        with open(filename, 'rb') as f:
            return f.read()
    except OSError as e:
        raise RomReadError(f"Cannot read ROM '{filename}': {e}") from e


def load_rom(state: EmulatorState, filename: str | os.PathLike) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_rom_bytes(state, read_rom(filename))
