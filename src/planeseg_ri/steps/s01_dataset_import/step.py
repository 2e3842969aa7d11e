"""Step 01: Load a recorded cloud selected by preset index."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

from planeseg_ri.core.step_base import BaseStep
from planeseg_ri.utils.io import SUPPORTED_CLOUD_EXTENSIONS, is_supported_cloud_file, load_point_cloud
from .config import DatasetImportConfig, DatasetPreset
from .contracts import DatasetImportInput, DatasetImportOutput

logger = logging.getLogger(__name__)


class DatasetImportStep(
    BaseStep[DatasetImportInput, DatasetImportOutput, DatasetImportConfig]
):
    """Loads preset clouds; the preset viewpoint replaces the tracked pose."""

    name: ClassVar[str] = "dataset_import"
    input_type: ClassVar = DatasetImportInput
    output_type: ClassVar = DatasetImportOutput
    config_type: ClassVar = DatasetImportConfig

    def preset(self, index: int) -> DatasetPreset | None:
        presets = self.config.presets
        if not 0 <= index < len(presets):
            logger.error(f"No dataset preset {index} (have {len(presets)})")
            return None
        return presets[index]

    def resolve_path(self, path: Path) -> Path:
        return path if path.is_absolute() else self.config.data_root / path

    def validate_inputs(self, inputs: DatasetImportInput) -> bool:
        if not is_supported_cloud_file(inputs.path):
            logger.error(
                f"Extension not understood: '{inputs.path.suffix}' "
                f"(expected one of {', '.join(SUPPORTED_CLOUD_EXTENSIONS)}), skipping {inputs.path}"
            )
            return False
        return True

    def run(self, inputs: DatasetImportInput) -> DatasetImportOutput:
        # A missing file raises FileNotFoundError here
        cloud = load_point_cloud(inputs.path, frame_id=self.config.frame_id)
        return DatasetImportOutput(
            cloud=cloud,
            origin=inputs.origin,
            look_dir=inputs.look_dir,
            source=inputs.path,
        )

    def load(self, index: int) -> DatasetImportOutput | None:
        """Load preset ``index``; None (after logging why) if it cannot be read."""
        preset = self.preset(index)
        if preset is None:
            return None

        path = self.resolve_path(preset.path)
        logger.info(f"Processing dataset preset {index} ({preset.name}): {path}")
        return self.load_file(path, preset.origin, preset.look_dir)

    def load_file(self, path: Path, origin, look_dir) -> DatasetImportOutput | None:
        inputs = DatasetImportInput(path=path, origin=origin, look_dir=look_dir)
        if not self.validate_inputs(inputs):
            return None
        return self.execute(inputs)
