"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass


class Mnemonic(enum.Enum):
    """The base CHIP-8 instruction set, plus UNKNOWN for unassigned words."""
    SYS = "SYS"              # 0NNN
    CLS = "CLS"              # 00E0
    RET = "RET"              # 00EE
    JP = "JP"                # 1NNN
    CALL = "CALL"            # 2NNN
    SE_IMM = "SE_IMM"        # 3XNN
    SNE_IMM = "SNE_IMM"      # 4XNN
    SE_REG = "SE_REG"        # 5XY0
    LD_IMM = "LD_IMM"        # 6XNN
    ADD_IMM = "ADD_IMM"      # 7XNN
    LD_REG = "LD_REG"        # 8XY0
    OR = "OR"                # 8XY1
    AND = "AND"              # 8XY2
    XOR = "XOR"              # 8XY3
    ADD_REG = "ADD_REG"      # 8XY4
    SUB = "SUB"              # 8XY5
    SHR = "SHR"              # 8XY6
    SUBN = "SUBN"            # 8XY7
    SHL = "SHL"              # 8XYE
    SNE_REG = "SNE_REG"      # 9XY0
    LD_I = "LD_I"            # ANNN
    JP_V0 = "JP_V0"          # BNNN
    RND = "RND"              # CXNN
    DRW = "DRW"              # DXYN
    SKP = "SKP"              # EX9E
    SKNP = "SKNP"            # EXA1
    LD_VX_DT = "LD_VX_DT"    # FX07
    LD_VX_K = "LD_VX_K"      # FX0A
    LD_DT_VX = "LD_DT_VX"    # FX15
    LD_ST_VX = "LD_ST_VX"    # FX18
    ADD_I = "ADD_I"          # FX1E
    LD_F = "LD_F"            # FX29
    LD_B = "LD_B"            # FX33
    LD_MEM_VX = "LD_MEM_VX"  # FX55
    LD_VX_MEM = "LD_VX_MEM"  # FX65
    UNKNOWN = "UNKNOWN"


# Families identified by the leading nibble alone.
_PRIMARY = {
    0x1: Mnemonic.JP,
    0x2: Mnemonic.CALL,
    0x3: Mnemonic.SE_IMM,
    0x4: Mnemonic.SNE_IMM,
    0x5: Mnemonic.SE_REG,
    0x6: Mnemonic.LD_IMM,
    0x7: Mnemonic.ADD_IMM,
    0x9: Mnemonic.SNE_REG,
    0xA: Mnemonic.LD_I,
    0xB: Mnemonic.JP_V0,
    0xC: Mnemonic.RND,
    0xD: Mnemonic.DRW,
}

_SYSTEM = {
    0x0E0: Mnemonic.CLS,
    0x0EE: Mnemonic.RET,
}

_ALU = {
    0x0: Mnemonic.LD_REG,
    0x1: Mnemonic.OR,
    0x2: Mnemonic.AND,
    0x3: Mnemonic.XOR,
    0x4: Mnemonic.ADD_REG,
    0x5: Mnemonic.SUB,
    0x6: Mnemonic.SHR,
    0x7: Mnemonic.SUBN,
    0xE: Mnemonic.SHL,
}

_KEYPAD = {
    0x9E: Mnemonic.SKP,
    0xA1: Mnemonic.SKNP,
}

_MISC = {
    0x07: Mnemonic.LD_VX_DT,
    0x0A: Mnemonic.LD_VX_K,
    0x15: Mnemonic.LD_DT_VX,
    0x18: Mnemonic.LD_ST_VX,
    0x1E: Mnemonic.ADD_I,
    0x29: Mnemonic.LD_F,
    0x33: Mnemonic.LD_B,
    0x55: Mnemonic.LD_MEM_VX,
    0x65: Mnemonic.LD_VX_MEM,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)
    mnemonic: Mnemonic = Mnemonic.UNKNOWN


def _lookup(opcode: int, n: int, nn: int, nnn: int) -> Mnemonic:
    if opcode == 0x0:
        # Anything other than 00E0/00EE is a machine-code call
        return _SYSTEM.get(nnn, Mnemonic.SYS)
    if opcode == 0x8:
        return _ALU.get(n, Mnemonic.UNKNOWN)
    if opcode == 0xE:
        return _KEYPAD.get(nn, Mnemonic.UNKNOWN)
    if opcode == 0xF:
        return _MISC.get(nn, Mnemonic.UNKNOWN)
    return _PRIMARY[opcode]


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    opcode = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF
    nnn = instruction & 0x0FFF
    return DecodedInstruction(
        raw=instruction,
        opcode=opcode,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=nnn,
        mnemonic=_lookup(opcode, n, nn, nnn),
    )


def disassemble(instruction: int) -> str:
    """Render an instruction word in conventional CHIP-8 assembly syntax."""
    d = decode(instruction)
    m = Mnemonic
    formats = {
        m.SYS: f"SYS 0x{d.nnn:03X}",
        m.CLS: "CLS",
        m.RET: "RET",
        m.JP: f"JP 0x{d.nnn:03X}",
        m.CALL: f"CALL 0x{d.nnn:03X}",
        m.SE_IMM: f"SE V{d.x:X}, 0x{d.nn:02X}",
        m.SNE_IMM: f"SNE V{d.x:X}, 0x{d.nn:02X}",
        m.SE_REG: f"SE V{d.x:X}, V{d.y:X}",
        m.LD_IMM: f"LD V{d.x:X}, 0x{d.nn:02X}",
        m.ADD_IMM: f"ADD V{d.x:X}, 0x{d.nn:02X}",
        m.LD_REG: f"LD V{d.x:X}, V{d.y:X}",
        m.OR: f"OR V{d.x:X}, V{d.y:X}",
        m.AND: f"AND V{d.x:X}, V{d.y:X}",
        m.XOR: f"XOR V{d.x:X}, V{d.y:X}",
        m.ADD_REG: f"ADD V{d.x:X}, V{d.y:X}",
        m.SUB: f"SUB V{d.x:X}, V{d.y:X}",
        m.SHR: f"SHR V{d.x:X}",
        m.SUBN: f"SUBN V{d.x:X}, V{d.y:X}",
        m.SHL: f"SHL V{d.x:X}",
        m.SNE_REG: f"SNE V{d.x:X}, V{d.y:X}",
        m.LD_I: f"LD I, 0x{d.nnn:03X}",
        m.JP_V0: f"JP V0, 0x{d.nnn:03X}",
        m.RND: f"RND V{d.x:X}, 0x{d.nn:02X}",
        m.DRW: f"DRW V{d.x:X}, V{d.y:X}, {d.n}",
        m.SKP: f"SKP V{d.x:X}",
        m.SKNP: f"SKNP V{d.x:X}",
        m.LD_VX_DT: f"LD V{d.x:X}, DT",
        m.LD_VX_K: f"LD V{d.x:X}, K",
        m.LD_DT_VX: f"LD DT, V{d.x:X}",
        m.LD_ST_VX: f"LD ST, V{d.x:X}",
        m.ADD_I: f"ADD I, V{d.x:X}",
        m.LD_F: f"LD F, V{d.x:X}",
        m.LD_B: f"LD B, V{d.x:X}",
        m.LD_MEM_VX: f"LD [I], V{d.x:X}",
        m.LD_VX_MEM: f"LD V{d.x:X}, [I]",
    }
    return formats.get(d.mnemonic, f"DW 0x{d.raw:04X}")
