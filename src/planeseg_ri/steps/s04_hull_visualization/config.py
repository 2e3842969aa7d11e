"""Configuration for Step 04: Hull visualization."""

from pydantic import BaseModel, Field


class HullVisualizationConfig(BaseModel):
    frame_id: str = Field("odom", description="Frame of the hull cloud and markers")
    namespace: str = Field("hull lines", description="Marker namespace")
    marker_id: int = Field(0, description="Marker id inside the namespace")
    line_width: float = Field(0.03, gt=0, description="Line-list line width (meters)")
    alpha: float = Field(1.0, ge=0, le=1, description="Opacity of every marker point")
    frame_locked: bool = Field(True, description="Keep markers attached to frame_id as it moves")
    palette: list[tuple[float, float, float]] | None = Field(
        None, description="RGB colors in [0, 1] cycled over blocks (None = built-in palette)"
    )
