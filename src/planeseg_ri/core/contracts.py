"""Common Pydantic models shared across interface steps."""

from __future__ import annotations

from typing import Annotated, Any

import numpy as np
from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator,
)

from planeseg_ri.steps.s01_dataset_import.config import DatasetImportConfig
from planeseg_ri.steps.s02_elevation_map.config import ElevationMapConfig
from planeseg_ri.steps.s03_segmentation.config import SegmentationConfig
from planeseg_ri.steps.s04_hull_visualization.config import HullVisualizationConfig
from planeseg_ri.utils.geometry import qvec2rotmat, rotmat2qvec


def _as_float_tuple(value: Any) -> Any:
    """Coerce numpy arrays / lists of numpy scalars into a plain float tuple."""
    if isinstance(value, (np.ndarray, list, tuple)):
        return tuple(float(c) for c in np.asarray(value, dtype=np.float64).ravel())
    return value


Vector3 = Annotated[tuple[float, float, float], BeforeValidator(_as_float_tuple)]
Quaternion = Annotated[tuple[float, float, float, float], BeforeValidator(_as_float_tuple)]


class Pose(BaseModel):
    """Position + orientation. Orientation is a quaternion (w, x, y, z)."""

    model_config = ConfigDict(frozen=True)

    position: Vector3 = (0.0, 0.0, 0.0)
    orientation: Quaternion = (1.0, 0.0, 0.0, 0.0)

    @classmethod
    def identity(cls) -> Pose:
        return cls()

    @classmethod
    def from_matrix(cls, rotation: np.ndarray, translation: np.ndarray) -> Pose:
        """Build a pose from a 3x3 rotation matrix and a translation vector."""
        qvec = rotmat2qvec(np.asarray(rotation, dtype=np.float64))
        # Keep w >= 0 so equivalent rotations serialize identically
        if qvec[0] < 0:
            qvec = -qvec
        qvec = qvec / np.linalg.norm(qvec)
        return cls(position=translation, orientation=qvec)

    def rotation_matrix(self) -> np.ndarray:
        return qvec2rotmat(self.orientation)

    def translation(self) -> np.ndarray:
        return np.array(self.position, dtype=np.float64)


class PlanarBlock(BaseModel):
    """One planar surface returned by the block fitter."""

    model_config = ConfigDict(frozen=True)

    size: Vector3 = Field(..., description="Extent of the block along its local axes")
    pose: Pose = Field(default_factory=Pose, description="Block frame in the cloud frame")
    hull: tuple[Vector3, ...] = Field(
        default=(), description="Boundary polygon vertices, in winding order"
    )

    @field_validator("hull", mode="before")
    @classmethod
    def _coerce_hull(cls, value: Any) -> Any:
        if isinstance(value, (np.ndarray, list, tuple)):
            arr = np.asarray(value, dtype=np.float64)
            if arr.size == 0:
                return ()
            if arr.ndim != 2 or arr.shape[1] != 3:
                raise ValueError(f"hull must be a sequence of 3D points, got shape {arr.shape}")
            return tuple(tuple(float(c) for c in row) for row in arr)
        return value

    def hull_array(self) -> np.ndarray:
        """Hull as an (n, 3) float array (empty hulls give shape (0, 3))."""
        return np.asarray(self.hull, dtype=np.float64).reshape(-1, 3)


class SegmentationResult(BaseModel):
    """Ordered fitter output for one cloud. Order is detection order."""

    model_config = ConfigDict(frozen=True)

    blocks: tuple[PlanarBlock, ...] = ()

    @property
    def num_blocks(self) -> int:
        return len(self.blocks)

    @property
    def num_hull_points(self) -> int:
        return sum(len(b.hull) for b in self.blocks)


class LabeledCloud(BaseModel):
    """Point cloud with optional per-point integer labels."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    points: np.ndarray = Field(..., description="(N, 3) float64 XYZ")
    labels: np.ndarray | None = Field(None, description="(N,) integer labels")
    frame_id: str = "odom"
    stamp: float = Field(0.0, description="Seconds; 0 means 'latest available'")

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> np.ndarray:
        arr = np.asarray(value, dtype=np.float64)
        if arr.size == 0:
            return arr.reshape(0, 3)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError(f"points must have shape (N, 3), got {arr.shape}")
        return arr

    @field_validator("labels", mode="before")
    @classmethod
    def _coerce_labels(cls, value: Any) -> np.ndarray | None:
        if value is None:
            return None
        return np.asarray(value, dtype=np.int64).ravel()

    @model_validator(mode="after")
    def _check_label_count(self) -> LabeledCloud:
        if self.labels is not None and len(self.labels) != len(self.points):
            raise ValueError(
                f"labels has {len(self.labels)} entries for {len(self.points)} points"
            )
        return self

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0])


class StampedPose(BaseModel):
    """A pose tagged with a frame and a timestamp, as published downstream."""

    model_config = ConfigDict(frozen=True)

    pose: Pose
    frame_id: str = "odom"
    stamp: float = 0.0


class TopicConfig(BaseModel):
    """Stream names the transport binds handlers and outputs to."""

    point_cloud_in: str = "/plane_seg/point_cloud_in"
    elevation_map_in: str = "/elevation_mapping/elevation_map"
    pose_in: str = "/state_estimator/pose_in_odom"
    received_cloud: str = "/plane_seg/received_cloud"
    hull_cloud: str = "/plane_seg/hull_cloud"
    hull_markers: str = "/plane_seg/hull_markers"
    look_pose: str = "/plane_seg/look_pose"


class InterfaceConfig(BaseModel):
    """Top-level robot interface configuration loaded from interface.yaml."""

    project_name: str = "plane_seg"
    queue_size: int = Field(100, ge=1, description="Per-stream event queue depth")
    topics: TopicConfig = Field(default_factory=TopicConfig)
    fitter: str | None = Field(None, description="Block fitter class as 'package.module:ClassName'")
    fitter_kwargs: dict[str, Any] = Field(default_factory=dict)
    print_result_json: bool = Field(False, description="Log each result as affordance JSON")
    run_examples: list[int] = Field(
        default_factory=lambda: [4, 5], description="Dataset presets processed by run-examples"
    )
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    hull_visualization: HullVisualizationConfig = Field(default_factory=HullVisualizationConfig)
    dataset: DatasetImportConfig = Field(default_factory=DatasetImportConfig)
    elevation_map: ElevationMapConfig = Field(default_factory=ElevationMapConfig)
