"""Configuration for Step 02: Elevation map to point cloud conversion."""

from pydantic import BaseModel, Field


class ElevationMapConfig(BaseModel):
    layer: str = Field("elevation", description="Grid map layer used as point height")
