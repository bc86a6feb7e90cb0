import os
from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass

from chipjax.constants import DEFAULT_INSTRUCTION_FREQUENCY, DEFAULT_TIMER_FREQUENCY, NUM_KEYS
from chipjax.emulator import StepStatus, load_rom_bytes, read_rom, step
from chipjax.errors import EmulatorError
from chipjax.logging import EmulatorLogger
from chipjax.rendering import framebuffer_to_rgb, create_color_scheme
from chipjax.state import EmulatorState, create_state, with_keypad
from chipjax.timers import sound_active, tick_timers


@dataclass(frozen=True)
class FrameResult:
    """Output of one control-loop iteration for the render collaborator.

    Attributes:
        display: Flat framebuffer after the frame's instructions
        sound_active: Whether the buzzer should sound
        instructions: Number of instructions executed during the frame
        parked: Whether the machine ended the frame waiting for a key
    """
    display: jnp.ndarray
    sound_active: bool
    instructions: int
    parked: bool


class Chip8Session:
    """A CHIP-8 emulation session implementing the control loop.

    Each call to `run_frame` refreshes input, executes the frame's share of
    instructions, ticks the timers at their own rate and hands back the
    framebuffer. Instruction and timer rates are independent: both are
    expressed in Hz and converted to per-frame budgets with fractional
    remainders carried over between frames.
    """

    def __init__(
        self,
        rom_path: Optional[str | os.PathLike] = None,
        rom_data: Optional[bytes] = None,
        instruction_frequency: float = DEFAULT_INSTRUCTION_FREQUENCY,
        timer_frequency: float = DEFAULT_TIMER_FREQUENCY,
        fps: float = 60,
        modern_mode: bool = True,
        strict: bool = False,
        seed: int = 0,
        logger: Optional[EmulatorLogger] = None,
        render_scale: int = 8,
        color_scheme: str = "classic",
    ):
        """Initialize the session and load the ROM.

        Args:
            rom_path: Path to the CHIP-8 ROM file to load
            rom_data: Raw ROM bytes; used instead of rom_path when given
            instruction_frequency: Instructions executed per second
            timer_frequency: Delay/sound timer decrements per second
            fps: Frames presented per second (calls to run_frame)
            modern_mode: Single-operand shifts (True) or legacy VY shifts (False)
            strict: Raise UnknownOpcodeError instead of skipping unknown opcodes
            seed: Seed of the PRNG key used by RND
            logger: Logger receiving session diagnostics
            render_scale: Upscaling factor used by `render`
            color_scheme: Color scheme used by `render`
        """
        if rom_data is None and rom_path is None:
            raise ValueError("Either rom_path or rom_data must be provided")
        if instruction_frequency <= 0 or timer_frequency < 0 or fps <= 0:
            raise ValueError("instruction_frequency and fps must be positive, timer_frequency non-negative")

        self.logger = logger or EmulatorLogger()
        self.rom_name = os.path.basename(os.fspath(rom_path)) if rom_path is not None else "<bytes>"
        self.rom_data = rom_data if rom_data is not None else read_rom(rom_path)
        self.instruction_frequency = instruction_frequency
        self.timer_frequency = timer_frequency
        self.fps = fps
        self.modern_mode = modern_mode
        self.strict = strict
        self.seed = seed
        self.render_scale = render_scale
        self.color_scheme = color_scheme
        create_color_scheme(color_scheme)

        self.logger.log_session_start({
            "rom": self.rom_name,
            "instruction_frequency": instruction_frequency,
            "timer_frequency": timer_frequency,
            "fps": fps,
            "modern_mode": modern_mode,
            "strict": strict,
            "seed": seed,
        })
        self.reset()

    @property
    def instructions_per_frame(self) -> float:
        return self.instruction_frequency / self.fps

    @property
    def timer_ticks_per_frame(self) -> float:
        return self.timer_frequency / self.fps

    def reset(self, seed: Optional[int] = None) -> EmulatorState:
        """Rebuild the machine and reload the ROM."""
        if seed is not None:
            self.seed = seed
        state = create_state(jax.random.PRNGKey(self.seed), modern_mode=self.modern_mode)
        self.state = load_rom_bytes(state, self.rom_data)
        self.logger.log_rom_loaded(self.rom_name, len(self.rom_data))

        self._instruction_budget = 0.0
        self._timer_budget = 0.0
        self.stats = {
            "frames": 0,
            "instructions": 0,
            "timer_ticks": 0,
            "unknown_opcodes": 0,
        }
        return self.state

    def step(self) -> StepStatus:
        """Execute a single instruction on the session state."""
        pc = int(self.state.pc)
        instruction = self._word_at(pc)
        try:
            state, status = step(self.state, strict=self.strict)
        except EmulatorError as e:
            self.logger.log_fault(e)
            raise

        self.state = state
        self.stats["instructions"] += 1
        if status is StepStatus.UNKNOWN_OPCODE:
            self.stats["unknown_opcodes"] += 1
            self.logger.log_unknown_opcode(pc, instruction)
        else:
            self.logger.log_trace(pc, instruction)
        return status

    def _word_at(self, pc: int) -> int:
        memory = self.state.memory
        return (int(memory[pc & 0xFFF]) << 8) | int(memory[(pc + 1) & 0xFFF])

    def tick_timers(self, ticks: int = 1):
        for _ in range(ticks):
            self.state = tick_timers(self.state)
        self.stats["timer_ticks"] += ticks

    def run_frame(self, keypad=None) -> FrameResult:
        """Run one control-loop iteration.

        Args:
            keypad: Optional snapshot of 16 key states; the previous snapshot is kept when None

        Returns:
            FrameResult with the framebuffer and buzzer state to present
        """
        if keypad is not None:
            self.state = with_keypad(self.state, keypad)

        self._instruction_budget += self.instructions_per_frame
        count = int(self._instruction_budget)
        self._instruction_budget -= count

        parked = bool(self.state.awaiting_input)
        executed = 0
        for _ in range(count):
            status = self.step()
            executed += 1
            parked = status is StepStatus.PARKED
            if parked:
                # Nothing changes until the input collaborator updates the keypad
                break

        self._timer_budget += self.timer_ticks_per_frame
        ticks = int(self._timer_budget)
        self._timer_budget -= ticks
        self.tick_timers(ticks)

        self.stats["frames"] += 1
        return FrameResult(
            display=self.state.display,
            sound_active=sound_active(self.state),
            instructions=executed,
            parked=parked,
        )

    def render(self) -> np.ndarray:
        """Render the current framebuffer as an RGB array."""
        on_color, off_color = create_color_scheme(self.color_scheme)
        return framebuffer_to_rgb(
            self.state.display,
            scale=self.render_scale,
            on_color=on_color,
            off_color=off_color,
        )

    def close(self):
        self.logger.log_session_end(self.stats)

    @staticmethod
    def empty_keypad() -> np.ndarray:
        return np.zeros(NUM_KEYS, dtype=bool)
