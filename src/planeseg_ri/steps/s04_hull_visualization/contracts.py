"""I/O contracts for Step 04: Hull visualization."""

from __future__ import annotations

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from planeseg_ri.core.contracts import SegmentationResult


def _points_array(value: Any) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.size == 0:
        return arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"points must have shape (N, 3), got {arr.shape}")
    return arr


class HullVisualizationInput(BaseModel):
    result: SegmentationResult
    stamp: float = Field(0.0, description="Timestamp for the outputs; 0 means 'latest available'")


class ColoredCloud(BaseModel):
    """Point cloud with one 8-bit RGB color per point."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    points: np.ndarray = Field(..., description="(N, 3) float64 XYZ")
    colors: np.ndarray = Field(..., description="(N, 3) uint8 RGB")
    frame_id: str = "odom"
    stamp: float = 0.0

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> np.ndarray:
        return _points_array(value)

    @field_validator("colors", mode="before")
    @classmethod
    def _coerce_colors(cls, value: Any) -> np.ndarray:
        return np.asarray(value, dtype=np.uint8).reshape(-1, 3)

    @model_validator(mode="after")
    def _check_lengths(self) -> ColoredCloud:
        if len(self.colors) != len(self.points):
            raise ValueError(f"{len(self.colors)} colors for {len(self.points)} points")
        return self

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0])


class LineListMarker(BaseModel):
    """Line list: points 2k and 2k+1 form segment k; one RGBA color per point."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    points: np.ndarray = Field(..., description="(2M, 3) float64 segment endpoints")
    colors: np.ndarray = Field(..., description="(2M, 4) float RGBA in [0, 1]")
    namespace: str = "hull lines"
    marker_id: int = 0
    line_width: float = 0.03
    frame_id: str = "odom"
    stamp: float = 0.0
    frame_locked: bool = True

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> np.ndarray:
        return _points_array(value)

    @field_validator("colors", mode="before")
    @classmethod
    def _coerce_colors(cls, value: Any) -> np.ndarray:
        return np.asarray(value, dtype=np.float64).reshape(-1, 4)

    @model_validator(mode="after")
    def _check_lengths(self) -> LineListMarker:
        if len(self.points) % 2:
            raise ValueError(f"line list needs an even number of points, got {len(self.points)}")
        if len(self.colors) != len(self.points):
            raise ValueError(f"{len(self.colors)} colors for {len(self.points)} points")
        return self

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def num_segments(self) -> int:
        return self.num_points // 2


class VisualizationOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    hull_cloud: ColoredCloud
    hull_markers: LineListMarker
