"""CHIP-8 ALU operations (8xxx).

Each operation maps (VX, VY) to (result, VF). A VF of None leaves the flag
register untouched. The flag is written before the result, so an operation
targeting VF itself keeps the arithmetic result.
"""

from typing import Optional

from chipjax.state import EmulatorState, set_register, set_flag
from chipjax.decode import DecodedInstruction, Mnemonic


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    return (vx - vy) & 0xFF, int(vx > vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return (vy - vx) & 0xFF, int(vy > vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    Mnemonic.LD_REG: alu_set,
    Mnemonic.OR: alu_or,
    Mnemonic.AND: alu_and,
    Mnemonic.XOR: alu_xor,
    Mnemonic.ADD_REG: alu_add,
    Mnemonic.SUB: alu_sub_xy,
    Mnemonic.SHR: alu_shift_right,
    Mnemonic.SUBN: alu_sub_yx,
    Mnemonic.SHL: alu_shift_left,
}

_SHIFTS = (Mnemonic.SHR, Mnemonic.SHL)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])

    # Legacy interpreters shift VY into VX
    if instruction.mnemonic in _SHIFTS and not state.modern_mode:
        vx = vy

    result, vf = ALU_OPERATIONS[instruction.mnemonic](vx, vy)

    if vf is not None:
        state = set_flag(state, vf)
    return set_register(state, instruction.x, result)
