"""Structured logging setup for the plane segmentation interface."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", open3d_verbose: bool = False) -> None:
    """Configure structured logging and align Open3D console verbosity with it.

    Open3D prints its own warnings straight to the console; they are
    silenced unless ``open3d_verbose`` is set or the level is DEBUG.
    """
    log_level = getattr(logging, level.upper())
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    try:
        import open3d as o3d
    except ImportError:
        return
    if open3d_verbose or log_level <= logging.DEBUG:
        o3d.utility.set_verbosity_level(o3d.utility.VerbosityLevel.Debug)
    else:
        o3d.utility.set_verbosity_level(o3d.utility.VerbosityLevel.Error)
