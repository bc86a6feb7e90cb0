"""
Headless CHIP-8 runner: executes a ROM for a fixed number of frames and optionally
records the presented frames as a video and the last frame as a screenshot.

    python run.py rom=roms/pong.ch8 frames=1200 video=pong.mp4
"""

import sys

import hydra
from omegaconf import DictConfig, OmegaConf
from tqdm import tqdm

from chipjax import Chip8Session, EmulatorError, create_video, save_screenshot
from chipjax.logging import EmulatorLogger


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    cfg = OmegaConf.to_container(cfg)
    logger = EmulatorLogger(log_level=cfg["log_level"])

    try:
        session = Chip8Session(
            rom_path=hydra.utils.to_absolute_path(cfg["rom"]),
            instruction_frequency=cfg["instruction_frequency"],
            timer_frequency=cfg["timer_frequency"],
            fps=cfg["fps"],
            modern_mode=cfg["modern_mode"],
            strict=cfg["strict"],
            seed=cfg["seed"],
            logger=logger,
            render_scale=cfg["scale"],
            color_scheme=cfg["color_scheme"],
        )
    except EmulatorError as e:
        logger.log_fault(e)
        sys.exit(1)

    frames = []
    exit_code = 0
    keypad = session.empty_keypad()
    for _ in tqdm(range(cfg["frames"]), desc=f"Running {session.rom_name}", unit="frame"):
        try:
            result = session.run_frame(keypad)
        except EmulatorError:
            exit_code = 1
            break
        if cfg["video"]:
            frames.append(result.display)

    if cfg["video"] and frames:
        create_video(frames, filename=cfg["video"], fps=cfg["fps"], scale=cfg["scale"],
                     color_scheme=cfg["color_scheme"])
        logger.info(f"Video saved: {cfg['video']} ({len(frames)} frames)")

    if cfg["screenshot"]:
        save_screenshot(session.state.display, cfg["screenshot"], scale=cfg["scale"],
                        color_scheme=cfg["color_scheme"])
        logger.info(f"Screenshot saved: {cfg['screenshot']}")

    session.close()
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
