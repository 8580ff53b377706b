"""Run a CHIP-8 ROM headlessly and optionally save the final frame."""

import os

os.environ["XLA_PYTHON_CLIENT_PREALLOCATE"] = "false"

import hydra
from omegaconf import DictConfig, OmegaConf

from chipjax import Machine, Dialect, WrapMode, IllegalOpcode
from chipjax.logging import ConsoleLogger
from chipjax.rendering import save_frame


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    cfg = OmegaConf.to_container(cfg)
    logger = ConsoleLogger(name="chipjax", log_level=cfg["log_level"])

    logger.info("Configuration:")
    for key, value in cfg.items():
        logger.info(f"  {key}: {value}")

    machine = Machine(
        dialect=Dialect(cfg["dialect"]),
        wrap_mode=WrapMode(cfg["wrap_mode"]),
        seed=cfg["seed"],
        logger=logger,
    )
    # Paths are relative to the launch directory, not the Hydra run directory
    machine.load_rom_file(hydra.utils.to_absolute_path(cfg["rom"]))

    try:
        machine.run(cfg["cycles"], progress=cfg["progress"])
    except IllegalOpcode:
        logger.critical("Execution halted")
        raise
    finally:
        state = machine.state
        logger.info(
            f"PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"delay={int(state.delay_timer)} sound={int(state.sound_timer)}"
        )
        logger.debug("Registers: " + " ".join(f"V{i:X}={int(v):02X}" for i, v in enumerate(machine.registers)))

    if cfg["screenshot"]:
        path = hydra.utils.to_absolute_path(cfg["screenshot"])
        save_frame(machine.display, path, scale=cfg["scale"], color_scheme=cfg["color_scheme"])
        logger.info(f"Frame saved: {path}")


if __name__ == "__main__":
    main()
