"""CHIP-8 emulator errors."""


class EmulatorError(Exception):
    """Base error for emulation failures."""


class StackError(EmulatorError):
    """Call stack misuse."""


class StackOverflowError(StackError):
    """Raised when CALL is executed with every stack slot in use."""


class StackUnderflowError(StackError):
    """Raised when RET is executed with an empty stack."""


class RomError(EmulatorError):
    """ROM ingestion failure."""


class RomTooLargeError(RomError):
    """Raised when a ROM does not fit between PROGRAM_START and the top of memory."""

    def __init__(self, size: int, capacity: int):
        super().__init__(f"ROM is {size} bytes but only {capacity} bytes fit in memory")
        self.size = size
        self.capacity = capacity


class RomReadError(RomError):
    """Raised when a ROM source cannot be read or holds no data."""


class UnknownOpcodeError(EmulatorError):
    """Raised by strict stepping when an instruction word matches no handler."""

    def __init__(self, pc: int, instruction: int):
        super().__init__(f"Unknown opcode 0x{instruction:04X} at 0x{pc:03X}")
        self.pc = pc
        self.instruction = instruction
