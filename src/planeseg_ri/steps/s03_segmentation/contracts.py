"""I/O contracts for Step 03: Planar segmentation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from planeseg_ri.core.contracts import (
    LabeledCloud, PlanarBlock, Pose, SegmentationResult, StampedPose, Vector3,
)
from .config import FitterConfig


@runtime_checkable
class BlockFitter(Protocol):
    """External planar segmentation capability.

    Returns planar blocks in detection order. Errors raised here are not
    handled by the segmentation step.
    """

    def fit(
        self,
        cloud: LabeledCloud,
        origin: np.ndarray,
        look_dir: np.ndarray,
        config: FitterConfig,
    ) -> Sequence[PlanarBlock | Mapping[str, Any]]: ...


class SegmentationInput(BaseModel):
    """Cloud plus either a tracked sensor pose or an explicit origin/look direction."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    cloud: LabeledCloud
    sensor_pose: Pose | None = Field(None, description="Pose the look direction is derived from")
    origin: Vector3 | None = Field(None, description="Explicit sensor origin (overrides pose)")
    look_dir: Vector3 | None = Field(None, description="Explicit look direction (overrides pose)")

    @model_validator(mode="after")
    def _check_viewpoint(self) -> SegmentationInput:
        explicit = (self.origin is not None, self.look_dir is not None)
        if any(explicit) and not all(explicit):
            raise ValueError("origin and look_dir must be given together")
        if self.sensor_pose is None and not all(explicit):
            raise ValueError("either sensor_pose or origin + look_dir is required")
        return self


class SegmentationOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    result: SegmentationResult
    look_pose: StampedPose = Field(..., description="Frame with z along the look direction")
    received_cloud: LabeledCloud = Field(..., description="Input cloud, re-stamped for publishing")
    origin: Vector3
    look_dir: Vector3
