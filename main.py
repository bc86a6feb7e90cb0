"""
Interactive CHIP-8 emulator window
"""

import argparse
import time

import numpy as np
import pygame

from chipjax import Chip8Session, EmulatorError, create_color_scheme, disassemble, save_screenshot
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chipjax.logging import EmulatorLogger

# Modern key mapping
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
    pygame.K_UP: 0x2, pygame.K_DOWN: 0x8, pygame.K_LEFT: 0x4, pygame.K_RIGHT: 0x6,
    pygame.K_SPACE: 0x5,
}


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay_height = len(text_lines) * line_height + 8
    overlay_width = max_width + 16

    overlay = pygame.Surface((overlay_width, overlay_height))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def run_emulator(rom_filename, modern_mode=True, scale=8, instruction_frequency=700, color_scheme="classic",
                 log_level="INFO"):
    """Main emulator loop"""
    logger = EmulatorLogger(log_level=log_level)
    try:
        session = Chip8Session(
            rom_path=rom_filename,
            instruction_frequency=instruction_frequency,
            modern_mode=modern_mode,
            logger=logger,
            render_scale=scale,
            color_scheme=color_scheme,
        )
    except EmulatorError as e:
        logger.log_fault(e)
        return

    on_color, off_color = create_color_scheme(color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption(f"CHIP-8 - {session.rom_name}")
    clock = pygame.time.Clock()
    font_small = pygame.font.Font(None, 18)
    font_tiny = pygame.font.Font(None, 16)

    keypad_state = session.empty_keypad()
    running = True
    paused = False
    show_debug = False
    result = None
    start_time = time.time()

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset, +/-=Speed, TAB=Debug, F12=Screenshot")

    while running:
        clock.tick(session.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_TAB:
                    show_debug = not show_debug
                elif event.key == pygame.K_F5:
                    session.reset()
                    keypad_state = session.empty_keypad()
                    paused = False
                    logger.info("Reset")
                elif event.key == pygame.K_F12:
                    filename = f"screenshot_{int(time.time())}.png"
                    save_screenshot(session.state.display, filename, scale=scale, color_scheme=color_scheme)
                    logger.info(f"Saved {filename}")
                elif event.key == pygame.K_EQUALS:
                    session.instruction_frequency = min(6000, session.instruction_frequency + 60)
                    logger.info(f"Speed: {session.instruction_frequency} Hz")
                elif event.key == pygame.K_MINUS:
                    session.instruction_frequency = max(60, session.instruction_frequency - 60)
                    logger.info(f"Speed: {session.instruction_frequency} Hz")
                elif event.key in KEY_MAP:
                    keypad_state[KEY_MAP[event.key]] = True
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    keypad_state[KEY_MAP[event.key]] = False

        if not paused:
            try:
                result = session.run_frame(keypad_state)
            except EmulatorError:
                # Already logged by the session; keep the last good frame on screen
                paused = True

        pixels = np.asarray(session.state.display).reshape(SCREEN_HEIGHT, SCREEN_WIDTH)
        screen.fill(off_color)
        for y, x in zip(*np.nonzero(pixels)):
            rect = pygame.Rect(x * scale, y * scale, scale, scale)
            pygame.draw.rect(screen, on_color, rect)

        if show_debug:
            state = session.state
            runtime = time.time() - start_time
            ips = session.stats["instructions"] / runtime if runtime > 0 else 0
            pc = int(state.pc)
            word = (int(state.memory[pc & 0xFFF]) << 8) | int(state.memory[(pc + 1) & 0xFFF])

            debug_lines = [
                f"PC: 0x{pc:03X}  {disassemble(word)}",
                f"I: 0x{int(state.I):03X}  SP: {state.stack.pointer}",
                f"Instructions: {session.stats['instructions']}",
                f"CPU: {ips:.0f} Hz (target: {session.instruction_frequency} Hz)",
                f"FPS: {clock.get_fps():.1f}",
                f"Status: {'PAUSED' if paused else 'RUNNING'}",
            ]
            if result is not None and result.parked:
                debug_lines.append("WAITING FOR KEY")
            draw_overlay_text(screen, debug_lines, (5, 5), font_small, alpha=100)

            timer_lines = [
                f"Delay: {int(state.delay_timer)}",
                f"Sound: {int(state.sound_timer)}",
            ]
            if result is not None and result.sound_active:
                timer_lines.append("BEEP")
            draw_overlay_text(screen, timer_lines, (SCREEN_WIDTH * scale - 80, 5), font_small, alpha=100)

            reg_lines = []
            for i in range(0, 16, 4):
                reg_lines.append(" ".join(f"V{j:X}:{int(state.V[j]):02X}" for j in range(i, i + 4)))
            draw_overlay_text(screen, reg_lines, (5, SCREEN_HEIGHT * scale - 80), font_tiny, alpha=80)

            pressed_keys = [f"{i:X}" for i in range(16) if keypad_state[i]]
            if pressed_keys:
                draw_overlay_text(screen, ["Keys: " + " ".join(pressed_keys)],
                                  (SCREEN_WIDTH * scale - 100, SCREEN_HEIGHT * scale - 25), font_tiny, alpha=150)
        elif paused:
            font = pygame.font.Font(None, 24)
            text = font.render("PAUSED - P to resume", True, (255, 255, 0))
            screen.blit(text, (10, 10))

        pygame.display.flip()

    session.close()
    pygame.quit()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM in a window")
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument("--scale", type=int, default=8, help="Pixel upscaling factor (default: 8)")
    parser.add_argument(
        "--instruction_frequency",
        type=int,
        default=700,
        help="Instructions executed per second (default: 700)",
    )
    parser.add_argument(
        "--legacy_shifts",
        action="store_true",
        help="Shift VY into VX for 8XY6/8XYE like the original interpreter",
    )
    parser.add_argument("--color_scheme", default="classic", help="Color scheme (default: classic)")
    parser.add_argument("--log_level", default="INFO", help="Console log level (default: INFO)")
    args = parser.parse_args()

    run_emulator(
        args.rom,
        modern_mode=not args.legacy_shifts,
        scale=args.scale,
        instruction_frequency=args.instruction_frequency,
        color_scheme=args.color_scheme,
        log_level=args.log_level,
    )
