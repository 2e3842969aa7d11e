"""Step 04: Turn block hulls into one colored cloud and one line-list marker."""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from planeseg_ri.core.contracts import SegmentationResult
from planeseg_ri.core.step_base import BaseStep
from planeseg_ri.utils.palette import ColorPalette
from .config import HullVisualizationConfig
from .contracts import (
    ColoredCloud, HullVisualizationInput, LineListMarker, VisualizationOutput,
)

logger = logging.getLogger(__name__)


def hull_outline(hull: np.ndarray) -> np.ndarray:
    """Segment endpoints drawing ``hull`` as a closed polygon.

    Consecutive vertices are joined in order, then the first vertex is joined
    to the last. A hull of n >= 2 vertices yields 2n endpoints; shorter hulls
    yield none.
    """
    hull = np.asarray(hull, dtype=np.float64).reshape(-1, 3)
    n = len(hull)
    if n < 2:
        return np.empty((0, 3))

    chain = np.empty((2 * (n - 1), 3))
    chain[0::2] = hull[:-1]
    chain[1::2] = hull[1:]
    closing = np.stack([hull[0], hull[-1]])
    return np.vstack([chain, closing])


class HullVisualizationStep(
    BaseStep[HullVisualizationInput, VisualizationOutput, HullVisualizationConfig]
):
    """Colors block ``i`` with ``palette.color_for(i)`` in both outputs."""

    name: ClassVar[str] = "hull_visualization"
    input_type: ClassVar = HullVisualizationInput
    output_type: ClassVar = VisualizationOutput
    config_type: ClassVar = HullVisualizationConfig

    def __init__(
        self,
        config: HullVisualizationConfig | None = None,
        palette: ColorPalette | None = None,
    ):
        super().__init__(config)
        if palette is None:
            palette = (
                ColorPalette(self.config.palette)
                if self.config.palette is not None
                else ColorPalette()
            )
        self.palette = palette

    def validate_inputs(self, inputs: HullVisualizationInput) -> bool:
        return True

    def run(self, inputs: HullVisualizationInput) -> VisualizationOutput:
        cloud_points: list[np.ndarray] = []
        cloud_colors: list[np.ndarray] = []
        line_points: list[np.ndarray] = []
        line_colors: list[np.ndarray] = []

        for i, block in enumerate(inputs.result.blocks):
            hull = block.hull_array()
            rgb = self.palette.color_for(i)

            cloud_points.append(hull)
            cloud_colors.append(np.tile(self.palette.color_for_255(i), (len(hull), 1)))

            outline = hull_outline(hull)
            if len(outline) == 0:
                logger.debug(f"Block {i}: hull has {len(hull)} vertices, no outline drawn")
                continue
            line_points.append(outline)
            line_colors.append(np.tile([*rgb, self.config.alpha], (len(outline), 1)))

        hull_cloud = ColoredCloud(
            points=np.vstack(cloud_points) if cloud_points else np.empty((0, 3)),
            colors=np.vstack(cloud_colors) if cloud_colors else np.empty((0, 3), dtype=np.uint8),
            frame_id=self.config.frame_id,
            stamp=inputs.stamp,
        )
        hull_markers = LineListMarker(
            points=np.vstack(line_points) if line_points else np.empty((0, 3)),
            colors=np.vstack(line_colors) if line_colors else np.empty((0, 4)),
            namespace=self.config.namespace,
            marker_id=self.config.marker_id,
            line_width=self.config.line_width,
            frame_id=self.config.frame_id,
            stamp=inputs.stamp,
            frame_locked=self.config.frame_locked,
        )
        logger.info(
            f"Rendered {inputs.result.num_blocks} hulls: {hull_cloud.num_points} cloud points, "
            f"{hull_markers.num_segments} line segments"
        )
        return VisualizationOutput(hull_cloud=hull_cloud, hull_markers=hull_markers)

    def render(self, result: SegmentationResult, stamp: float = 0.0) -> VisualizationOutput:
        return self.execute(HullVisualizationInput(result=result, stamp=stamp))
