"""CHIP-8 emulator package."""

from chipjax.state import EmulatorState, StackState, create_state, with_keypad
from chipjax.emulator import StepStatus, execute, fetch, step, load_rom, load_rom_bytes
from chipjax.decode import DecodedInstruction, Mnemonic, decode, disassemble
from chipjax.timers import tick_timers, sound_active
from chipjax.errors import (
    EmulatorError, StackError, StackOverflowError, StackUnderflowError,
    RomError, RomTooLargeError, RomReadError, UnknownOpcodeError,
)
from chipjax.constants import *
from chipjax.rendering import framebuffer_to_rgb, create_color_scheme, save_screenshot, create_video
from chipjax.session import Chip8Session, FrameResult

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "with_keypad",
    "StepStatus",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "load_rom_bytes",
    "DecodedInstruction",
    "Mnemonic",
    "decode",
    "disassemble",
    "tick_timers",
    "sound_active",
    "EmulatorError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "RomError",
    "RomTooLargeError",
    "RomReadError",
    "UnknownOpcodeError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "framebuffer_to_rgb",
    "create_color_scheme",
    "save_screenshot",
    "create_video",
    "Chip8Session",
    "FrameResult",
]
