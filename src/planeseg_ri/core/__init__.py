"""planeseg_ri core: shared contracts, base step, pose tracking, event dispatch."""

from .step_base import BaseStep
from .contracts import (
    InterfaceConfig, LabeledCloud, PlanarBlock, Pose, SegmentationResult, StampedPose, TopicConfig,
)
from .dispatcher import EventDispatcher, EventKind
from .pose_tracker import PoseTracker
from .pipeline_runner import build_fitter, import_fitter_class, load_interface_config, run_examples
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "InterfaceConfig",
    "LabeledCloud",
    "PlanarBlock",
    "Pose",
    "SegmentationResult",
    "StampedPose",
    "TopicConfig",
    "EventDispatcher",
    "EventKind",
    "PoseTracker",
    "build_fitter",
    "import_fitter_class",
    "load_interface_config",
    "run_examples",
    "setup_logging",
]
