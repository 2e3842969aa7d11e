"""I/O contracts for Step 01: Offline dataset import."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from planeseg_ri.core.contracts import LabeledCloud, Vector3


class DatasetImportInput(BaseModel):
    path: Path = Field(..., description="Cloud file (.pcd or .ply)")
    origin: Vector3 = Field(..., description="Sensor origin the cloud was captured from")
    look_dir: Vector3 = Field(..., description="Sensor look direction at capture time")


class DatasetImportOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    cloud: LabeledCloud
    origin: Vector3
    look_dir: Vector3
    source: Path
