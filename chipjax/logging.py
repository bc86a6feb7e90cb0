"""Console logging utilities for chipjax sessions.

Provides a leveled console logger with colors and elapsed-time stamps, and an
emulator-specific logger that reports session configuration, ROM loading,
unknown opcodes, faults and instruction traces.
"""

import time
import sys
from typing import Any, Dict

from chipjax.decode import disassemble


class ConsoleLogger:
    """Flexible console logger with level filtering and colors."""

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for emulation sessions."""

    def __init__(self, name: str = "CHIP-8", **kwargs):
        super().__init__(name, **kwargs)
        self.unknown_opcodes = {}

    def log_session_start(self, config: Dict[str, Any]):
        """Log session configuration."""
        self.info("=" * 60)
        self.info("Starting session with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_rom_loaded(self, name: str, size: int):
        self.info(f"Loaded ROM '{name}' ({size} bytes)")

    def log_unknown_opcode(self, pc: int, instruction: int):
        """Warn about an unknown opcode once per (pc, instruction) site, then at DEBUG."""
        site = (pc, instruction)
        count = self.unknown_opcodes.get(site, 0) + 1
        self.unknown_opcodes[site] = count
        message = f"Unknown opcode 0x{instruction:04X} at 0x{pc:03X}"
        if count == 1:
            self.warning(message)
        else:
            self.debug(f"{message} (seen {count} times)")

    def log_fault(self, error: Exception):
        self.error(f"{type(error).__name__}: {error}")

    def log_trace(self, pc: int, instruction: int):
        """Per-instruction trace, only formatted when DEBUG is enabled."""
        if self._should_log("DEBUG"):
            self.debug(f"0x{pc:03X}: {instruction:04X}  {disassemble(instruction)}")

    def log_session_end(self, stats: Dict[str, Any]):
        """Log session counters."""
        elapsed = time.time() - self.start_time
        self.info("=" * 60)
        self.info(f"Session finished after {elapsed:.1f}s")
        for key, value in stats.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)
