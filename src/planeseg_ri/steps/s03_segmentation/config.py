"""Configuration for Step 03: Planar segmentation through the block fitter."""

from pydantic import BaseModel, Field


class FitterConfig(BaseModel):
    """Settings handed to the external block fitter on every call."""

    debug: bool = Field(True, description="Let the fitter emit its debug output")
    remove_ground: bool = Field(False, description="Let the fitter strip the ground plane first")
    max_plane_angle_degrees: float = Field(
        10.0, gt=0, le=90,
        description="Max normal deviation inside one plane segment (5 suits LIDAR, 10 elevation maps)",
    )
    downsample_resolution: float | None = Field(
        None, gt=0, description="Voxel size for fitter-side downsampling (None = disabled)"
    )


class SegmentationConfig(BaseModel):
    fitter: FitterConfig = Field(default_factory=FitterConfig)
    frame_id: str = Field("odom", description="Frame of the re-published cloud and look pose")
