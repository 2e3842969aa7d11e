"""Tests for the interface runner: config loading and fitter import."""

import logging
from pathlib import Path

import numpy as np
import pytest
import yaml

from planeseg_ri.core.contracts import InterfaceConfig, LabeledCloud
from planeseg_ri.core.pipeline_runner import (
    build_fitter, import_fitter_class, load_interface_config, run_examples,
)
from planeseg_ri.interface import RecordingPublisher

FITTER_MODULE = '''
class FlatFitter:
    def __init__(self, height=0.0):
        self.height = height

    def fit(self, cloud, origin, look_dir, config):
        hull = [[0, 0, self.height], [1, 0, self.height], [1, 1, self.height]]
        return [{"size": [1, 1, 0.01], "hull": hull}]


class NotAFitter:
    pass
'''


@pytest.fixture
def fitter_module(tmp_path: Path, monkeypatch) -> str:
    module_dir = tmp_path / "fitters"
    module_dir.mkdir()
    (module_dir / "runner_test_fitters.py").write_text(FITTER_MODULE)
    monkeypatch.syspath_prepend(str(module_dir))
    return "runner_test_fitters"


class TestLoadInterfaceConfig:
    def test_load(self, tmp_path: Path):
        config_file = tmp_path / "interface.yaml"
        with open(config_file, "w") as f:
            yaml.dump({
                "project_name": "stairs",
                "queue_size": 10,
                "run_examples": [0],
                "segmentation": {"fitter": {"max_plane_angle_degrees": 5.0}},
            }, f)

        cfg = load_interface_config(config_file)
        assert cfg.project_name == "stairs"
        assert cfg.queue_size == 10
        assert cfg.run_examples == [0]
        assert cfg.segmentation.fitter.max_plane_angle_degrees == 5.0
        assert cfg.segmentation.fitter.debug is True

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_interface_config(config_file) == InterfaceConfig()

    def test_shipped_config(self):
        config_file = Path(__file__).resolve().parents[2] / "configs" / "interface.yaml"
        cfg = load_interface_config(config_file)
        assert cfg.fitter is None
        assert cfg.run_examples == [4, 5]


class TestImportFitterClass:
    @pytest.mark.parametrize("path", ["no_colon", ":Cls", "module:", ""])
    def test_bad_format(self, path):
        with pytest.raises(ValueError):
            import_fitter_class(path)

    def test_missing_module(self):
        with pytest.raises(ImportError):
            import_fitter_class("planeseg_ri_no_such_module:Fitter")

    def test_missing_class(self, fitter_module):
        with pytest.raises(ImportError):
            import_fitter_class(f"{fitter_module}:Missing")

    def test_class_without_fit(self, fitter_module):
        with pytest.raises(ImportError, match="fit"):
            import_fitter_class(f"{fitter_module}:NotAFitter")

    def test_import(self, fitter_module):
        cls = import_fitter_class(f"{fitter_module}:FlatFitter")
        assert cls.__name__ == "FlatFitter"

    def test_build_with_kwargs(self, fitter_module):
        cfg = InterfaceConfig(fitter=f"{fitter_module}:FlatFitter", fitter_kwargs={"height": 2.0})
        assert build_fitter(cfg).height == 2.0

    def test_build_without_fitter(self):
        with pytest.raises(ValueError):
            build_fitter(InterfaceConfig())


class TestRunExamples:
    def _write_config(self, tmp_path: Path, dataset_config, fitter_module, run=(1,)) -> Path:
        config_file = tmp_path / "interface.yaml"
        cfg = InterfaceConfig(
            fitter=f"{fitter_module}:FlatFitter",
            run_examples=list(run),
            dataset=dataset_config,
        )
        with open(config_file, "w") as f:
            yaml.dump(cfg.model_dump(mode="json"), f)
        return config_file

    def test_skipped_presets(self, tmp_path, dataset_config, fitter_module):
        config_file = self._write_config(tmp_path, dataset_config, fitter_module, run=(1, 7))
        publisher = RecordingPublisher()
        outputs = run_examples(config_file, publisher=publisher)
        assert outputs == [(1, None), (7, None)]
        assert not publisher.messages

    def test_missing_file_does_not_stop_later_presets(
        self, tmp_path, dataset_config, fitter_module, monkeypatch, caplog
    ):
        def fake_load(path, frame_id="odom"):
            if not Path(path).exists():
                raise FileNotFoundError(f"Point cloud file not found: {path}")
            return LabeledCloud(points=np.zeros((3, 3)), frame_id=frame_id)

        monkeypatch.setattr(
            "planeseg_ri.steps.s01_dataset_import.step.load_point_cloud", fake_load
        )
        config_file = self._write_config(tmp_path, dataset_config, fitter_module, run=(2, 0))
        publisher = RecordingPublisher()
        with caplog.at_level(logging.ERROR):
            outputs = run_examples(config_file, publisher=publisher)

        assert [i for i, _ in outputs] == [2, 0]
        assert outputs[0][1] is None
        assert outputs[1][1].received_cloud.num_points == 3
        assert publisher.count(InterfaceConfig().topics.look_pose) == 1
        assert "Dataset preset 2 could not be read" in caplog.text

    def test_processes_preset(self, tmp_path, dataset_config, fitter_module):
        pytest.importorskip("open3d")
        config_file = self._write_config(tmp_path, dataset_config, fitter_module)
        publisher = RecordingPublisher()
        outputs = run_examples(config_file, indices=[0], publisher=publisher)

        (index, output), = outputs
        assert index == 0
        assert output.result.num_blocks == 1
        assert output.visualization.hull_markers.num_points == 6
        assert publisher.count(InterfaceConfig().topics.hull_markers) == 1
