"""Step 02: Convert an elevation map layer into a point cloud."""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from planeseg_ri.core.contracts import LabeledCloud
from planeseg_ri.core.step_base import BaseStep
from .config import ElevationMapConfig
from .contracts import ElevationMapInput, ElevationMapOutput, GridMap

logger = logging.getLogger(__name__)


def cell_centers(grid_map: GridMap) -> tuple[np.ndarray, np.ndarray]:
    """(rows, cols) arrays of cell-center x and y coordinates."""
    rows, cols = grid_map.size
    length_x, length_y = grid_map.length
    res = grid_map.resolution
    px, py = grid_map.position
    xs = px + length_x / 2.0 - (np.arange(rows) + 0.5) * res
    ys = py + length_y / 2.0 - (np.arange(cols) + 0.5) * res
    return np.meshgrid(xs, ys, indexing="ij")


def grid_map_to_cloud(grid_map: GridMap, layer: str = "elevation") -> LabeledCloud:
    """One point per finite cell of ``layer`` at (cell x, cell y, value)."""
    if layer not in grid_map.layers:
        raise KeyError(f"Grid map has no layer '{layer}' (layers: {sorted(grid_map.layers)})")

    heights = grid_map.layers[layer]
    x, y = cell_centers(grid_map)
    valid = np.isfinite(heights)
    points = np.column_stack([x[valid], y[valid], heights[valid]])
    return LabeledCloud(points=points, frame_id=grid_map.frame_id, stamp=grid_map.stamp)


class ElevationMapStep(
    BaseStep[ElevationMapInput, ElevationMapOutput, ElevationMapConfig]
):
    name: ClassVar[str] = "elevation_map"
    input_type: ClassVar = ElevationMapInput
    output_type: ClassVar = ElevationMapOutput
    config_type: ClassVar = ElevationMapConfig

    def validate_inputs(self, inputs: ElevationMapInput) -> bool:
        layer = inputs.layer or self.config.layer
        if layer not in inputs.grid_map.layers:
            logger.error(
                f"Layer '{layer}' missing from grid map (layers: {sorted(inputs.grid_map.layers)})"
            )
            return False
        return True

    def run(self, inputs: ElevationMapInput) -> ElevationMapOutput:
        layer = inputs.layer or self.config.layer
        cloud = grid_map_to_cloud(inputs.grid_map, layer)
        rows, cols = inputs.grid_map.size
        logger.info(
            f"Elevation map {rows}x{cols} @ {inputs.grid_map.resolution} m: "
            f"{cloud.num_points} valid cells in layer '{layer}'"
        )
        return ElevationMapOutput(cloud=cloud, num_cells=rows * cols)

    def convert(self, grid_map: GridMap, layer: str | None = None) -> LabeledCloud:
        return self.execute(ElevationMapInput(grid_map=grid_map, layer=layer)).cloud
