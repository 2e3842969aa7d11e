"""I/O contracts for Step 02: Elevation map to point cloud conversion."""

from __future__ import annotations

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from planeseg_ri.core.contracts import LabeledCloud


class GridMap(BaseModel):
    """Regular 2D grid with named layers.

    Row index i runs along -x and column index j along -y, starting from the
    (+x, +y) corner of the map; ``position`` is the map center.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    layers: dict[str, np.ndarray] = Field(..., description="Layer name -> (rows, cols) values")
    resolution: float = Field(..., gt=0, description="Cell edge length (meters)")
    position: tuple[float, float] = Field((0.0, 0.0), description="Map center (x, y)")
    frame_id: str = "odom"
    stamp: float = 0.0

    @field_validator("layers", mode="before")
    @classmethod
    def _coerce_layers(cls, value: Any) -> dict[str, np.ndarray]:
        return {str(k): np.asarray(v, dtype=np.float64) for k, v in dict(value).items()}

    @model_validator(mode="after")
    def _check_shapes(self) -> GridMap:
        shapes = {name: layer.shape for name, layer in self.layers.items()}
        if any(len(s) != 2 for s in shapes.values()):
            raise ValueError(f"layers must be 2D, got shapes {shapes}")
        if len(set(shapes.values())) > 1:
            raise ValueError(f"all layers must share one shape, got {shapes}")
        return self

    @property
    def size(self) -> tuple[int, int]:
        if not self.layers:
            return (0, 0)
        rows, cols = next(iter(self.layers.values())).shape
        return rows, cols

    @property
    def length(self) -> tuple[float, float]:
        rows, cols = self.size
        return rows * self.resolution, cols * self.resolution


class ElevationMapInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    grid_map: GridMap
    layer: str | None = Field(None, description="Overrides the configured layer")


class ElevationMapOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    cloud: LabeledCloud
    num_cells: int = Field(..., description="Cells in the layer, including empty ones")
