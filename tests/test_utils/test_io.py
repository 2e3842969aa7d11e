"""Tests for planeseg_ri.utils.io: cloud files and the result JSON dump."""

import json
from pathlib import Path

import numpy as np
import pytest

from planeseg_ri.core.contracts import PlanarBlock, Pose, SegmentationResult
from planeseg_ri.utils.io import (
    dump_result_json, is_supported_cloud_file, load_point_cloud, result_to_affordances,
    write_colored_cloud, write_result_json,
)


@pytest.fixture
def two_block_result() -> SegmentationResult:
    return SegmentationResult(blocks=[
        PlanarBlock(
            size=[1.0, 2.0, 0.05],
            pose=Pose(position=[0.5, 0.0, 0.1], orientation=[1.0, 0.0, 0.0, 0.0]),
            hull=[[0, 0, 0], [1, 0, 0], [1, 1, 0]],
        ),
        PlanarBlock(size=[0.3, 0.3, 0.02], pose=Pose(position=[2.0, 1.0, 0.4])),
    ])


class TestResultDump:
    def test_ids_follow_block_order(self, two_block_result):
        records = result_to_affordances(two_block_result)
        assert list(records) == ["0_1", "0_2"]
        assert records["0_2"]["uuid"] == "0_2"

    def test_record_fields(self, two_block_result):
        record = result_to_affordances(two_block_result, name_prefix="step")["0_1"]
        assert record["classname"] == "BoxAffordanceItem"
        assert record["pose"] == [[0.5, 0.0, 0.1], [1.0, 0.0, 0.0, 0.0]]
        assert record["Dimensions"] == [1.0, 2.0, 0.05]
        assert record["Color"] == [0.5, 0.4, 0.5]
        assert record["Alpha"] == 1.0
        assert record["Name"] == "step 0"

    def test_empty_result(self):
        assert result_to_affordances(SegmentationResult()) == {}

    def test_dump_is_valid_json(self, two_block_result):
        assert json.loads(dump_result_json(two_block_result)) == result_to_affordances(two_block_result)

    def test_write_result_json(self, two_block_result, tmp_path: Path):
        path = write_result_json(two_block_result, tmp_path / "out" / "blocks.json")
        with open(path) as f:
            assert len(json.load(f)) == 2


class TestCloudFiles:
    @pytest.mark.parametrize("name,expected", [
        ("a.pcd", True), ("a.PLY", True), ("a.txt", False), ("a.pcd.bak", False), ("a", False),
    ])
    def test_supported_extensions(self, name, expected):
        assert is_supported_cloud_file(Path(name)) is expected

    def test_missing_file_raises(self, tmp_path: Path):
        pytest.importorskip("open3d")
        with pytest.raises(FileNotFoundError):
            load_point_cloud(tmp_path / "nope.pcd")

    def test_load_pcd(self, dataset_root: Path):
        pytest.importorskip("open3d")
        cloud = load_point_cloud(dataset_root / "terrain" / "square.pcd", frame_id="map")
        assert cloud.num_points == 4
        assert cloud.frame_id == "map"
        np.testing.assert_allclose(cloud.points[2], [1.0, 1.0, 0.0], atol=1e-6)
        assert cloud.labels is None

    def test_load_keeps_labels(self, labeled_pcd: Path):
        pytest.importorskip("open3d")
        cloud = load_point_cloud(labeled_pcd)
        assert cloud.labels is not None
        assert cloud.labels.dtype == np.int64
        assert cloud.labels.tolist() == [7, 7, 2]
        np.testing.assert_allclose(cloud.points[2], [2.0, 1.0, 0.3], atol=1e-6)

    def test_colored_cloud_round_trip(self, tmp_path: Path):
        pytest.importorskip("open3d")
        points = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]])
        colors = np.array([[255, 0, 0], [0, 128, 255]], dtype=np.uint8)
        path = write_colored_cloud(tmp_path / "hulls.ply", points, colors)
        cloud = load_point_cloud(path)
        np.testing.assert_allclose(cloud.points, points, atol=1e-6)
