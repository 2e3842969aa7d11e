"""Step 03: Derive the sensor viewpoint, run the block fitter, build the look pose."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import ClassVar

import numpy as np

from planeseg_ri.core.contracts import (
    LabeledCloud, PlanarBlock, Pose, SegmentationResult, StampedPose,
)
from planeseg_ri.core.step_base import BaseStep
from planeseg_ri.utils.geometry import look_rotation, sensor_look_dir
from .config import SegmentationConfig
from .contracts import BlockFitter, SegmentationInput, SegmentationOutput

logger = logging.getLogger(__name__)


def resolve_viewpoint(pose: Pose) -> tuple[np.ndarray, np.ndarray]:
    """Sensor origin and unit look direction for a tracked body pose."""
    return pose.translation(), sensor_look_dir(pose.orientation)


def compute_look_pose(origin: np.ndarray, look_dir: np.ndarray) -> Pose:
    """Pose at ``origin`` whose z axis points along ``look_dir``."""
    return Pose.from_matrix(look_rotation(look_dir), np.asarray(origin, dtype=np.float64))


class SegmentationStep(
    BaseStep[SegmentationInput, SegmentationOutput, SegmentationConfig]
):
    """Runs the injected block fitter on one cloud.

    The fitter is called with the step's fixed ``FitterConfig``; whatever it
    raises propagates to the caller untouched.
    """

    name: ClassVar[str] = "segmentation"
    input_type: ClassVar = SegmentationInput
    output_type: ClassVar = SegmentationOutput
    config_type: ClassVar = SegmentationConfig

    def __init__(
        self,
        fitter: BlockFitter,
        config: SegmentationConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(config)
        self.fitter = fitter
        self.clock = clock

    def validate_inputs(self, inputs: SegmentationInput) -> bool:
        if inputs.look_dir is not None and np.linalg.norm(inputs.look_dir) < 1e-12:
            logger.error("Explicit look direction is the zero vector")
            return False
        return True

    def run(self, inputs: SegmentationInput) -> SegmentationOutput:
        if inputs.origin is not None and inputs.look_dir is not None:
            origin = np.asarray(inputs.origin, dtype=np.float64)
            look_dir = np.asarray(inputs.look_dir, dtype=np.float64)
        else:
            origin, look_dir = resolve_viewpoint(inputs.sensor_pose)

        cloud = inputs.cloud
        logger.info(
            f"Fitting {cloud.num_points} points from origin {origin.round(3)} "
            f"looking {look_dir.round(3)}"
        )
        raw_blocks = self.fitter.fit(cloud, origin, look_dir, self.config.fitter)
        result = SegmentationResult(
            blocks=tuple(PlanarBlock.model_validate(b) for b in raw_blocks)
        )
        logger.info(
            f"Fitter returned {result.num_blocks} blocks, "
            f"{result.num_hull_points} hull vertices"
        )

        stamp = self.clock()
        look_pose = StampedPose(
            pose=compute_look_pose(origin, look_dir),
            frame_id=self.config.frame_id,
            stamp=stamp,
        )
        received = cloud.model_copy(update={"stamp": stamp, "frame_id": self.config.frame_id})

        return SegmentationOutput(
            result=result,
            look_pose=look_pose,
            received_cloud=received,
            origin=origin,
            look_dir=look_dir,
        )

    def process(
        self, cloud: LabeledCloud, tracked_pose: Pose
    ) -> tuple[SegmentationResult, StampedPose]:
        """Segment ``cloud`` as seen from ``tracked_pose``."""
        output = self.execute(SegmentationInput(cloud=cloud, sensor_pose=tracked_pose))
        return output.result, output.look_pose

    def process_with(
        self, cloud: LabeledCloud, origin, look_dir
    ) -> tuple[SegmentationResult, StampedPose]:
        """Segment ``cloud`` from an explicit origin and look direction."""
        output = self.execute(SegmentationInput(cloud=cloud, origin=origin, look_dir=look_dir))
        return output.result, output.look_pose
