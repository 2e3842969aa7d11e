"""Interface runner: reads interface.yaml, loads the fitter, replays dataset presets."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path

import yaml

from .contracts import InterfaceConfig

logger = logging.getLogger(__name__)


def load_interface_config(config_path: Path) -> InterfaceConfig:
    """Load and validate interface.yaml."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return InterfaceConfig(**raw)


def import_fitter_class(class_path: str) -> type:
    """Dynamically import a block fitter class.

    Expects class_path like 'my_planeseg.fitter:BlockFitter'; the class must
    provide a ``fit(cloud, origin, look_dir, config)`` method.
    """
    module_path, sep, class_name = class_path.partition(":")
    if not sep or not module_path or not class_name:
        raise ValueError(f"Fitter path must look like 'package.module:ClassName', got '{class_path}'")

    module = importlib.import_module(module_path)
    fitter_cls = getattr(module, class_name, None)
    if not isinstance(fitter_cls, type):
        raise ImportError(f"No class '{class_name}' found in {module_path}")
    if not callable(getattr(fitter_cls, "fit", None)):
        raise ImportError(f"{class_path} has no fit() method")
    return fitter_cls


def build_fitter(config: InterfaceConfig):
    """Instantiate the configured block fitter."""
    if not config.fitter:
        raise ValueError("No block fitter configured (set 'fitter' in the interface config)")
    fitter_cls = import_fitter_class(config.fitter)
    logger.info(f"Using block fitter {config.fitter}")
    return fitter_cls(**config.fitter_kwargs)


def run_examples(
    config_path: Path, indices: list[int] | None = None, publisher=None
) -> list[tuple[int, object]]:
    """Process dataset presets one after another through a fresh interface.

    Returns (preset index, cycle output) pairs; the output is None when the
    preset was skipped or its file could not be read.
    """
    from planeseg_ri.interface import RobotInterface

    config = load_interface_config(config_path)
    interface = RobotInterface(build_fitter(config), config=config, publisher=publisher)
    selected = indices if indices is not None else config.run_examples
    logger.info(f"Interface '{config.project_name}': running {len(selected)} dataset presets")

    outputs = []
    for index in selected:
        try:
            output = interface.process_from_file(index)
        except OSError:
            logger.exception(f"Dataset preset {index} could not be read, skipping")
            output = None
        outputs.append((index, output))

    logger.info("Finished dataset presets.")
    return outputs
