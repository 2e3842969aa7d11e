"""Configuration for Step 01: Offline dataset import."""

from pathlib import Path

from pydantic import BaseModel, Field


class DatasetPreset(BaseModel):
    """A recorded cloud plus the sensor viewpoint it was captured from."""

    name: str
    path: Path = Field(..., description="Cloud file, relative to data_root unless absolute")
    origin: tuple[float, float, float]
    look_dir: tuple[float, float, float]


DEFAULT_PRESETS: list[DatasetPreset] = [
    DatasetPreset(
        name="drc_tilted_steps", path=Path("terrain/tilted-steps.pcd"),
        origin=(0.248091, 0.012443, 1.806473), look_dir=(0.837001, 0.019831, -0.546842),
    ),
    DatasetPreset(
        name="drc_terrain_med", path=Path("terrain/terrain_med.pcd"),
        origin=(-0.028862, -0.007466, 0.087855), look_dir=(0.999890, -0.005120, -0.013947),
    ),
    DatasetPreset(
        name="drc_terrain_close_rect", path=Path("terrain/terrain_close_rect.pcd"),
        origin=(-0.028775, -0.005776, 0.087898), look_dir=(0.999956, -0.005003, 0.007958),
    ),
    DatasetPreset(
        name="anymal_stair_climb", path=Path("terrain/anymal/ori_entrance_stair_climb/06.pcd"),
        origin=(-0.028775, -0.005776, 0.987898), look_dir=(0.999956, -0.005003, 0.007958),
    ),
    DatasetPreset(
        name="race_crossplaneramps",
        path=Path("leica/race_arenas/RACE_crossplaneramps_sub1cm_cropped_meshlab_icp.ply"),
        origin=(-0.028775, -0.005776, 0.987898), look_dir=(0.999956, -0.005003, 0.007958),
    ),
    DatasetPreset(
        name="race_stepfield",
        path=Path("leica/race_arenas/RACE_stepfield_sub1cm_cropped_meshlab_icp.ply"),
        origin=(-0.028775, -0.005776, 0.987898), look_dir=(0.999956, -0.005003, 0.007958),
    ),
]


class DatasetImportConfig(BaseModel):
    data_root: Path = Field(Path("./data"), description="Directory preset paths are relative to")
    presets: list[DatasetPreset] = Field(
        default_factory=lambda: [p.model_copy() for p in DEFAULT_PRESETS]
    )
    frame_id: str = Field("odom", description="Frame assigned to loaded clouds")
