"""Shared pytest fixtures for planeseg_ri tests."""

from pathlib import Path

import numpy as np
import pytest

from planeseg_ri.core.contracts import InterfaceConfig, LabeledCloud, PlanarBlock, Pose
from planeseg_ri.steps.s01_dataset_import.config import DatasetImportConfig, DatasetPreset


def square_hull(n: int, z: float = 0.0, radius: float = 1.0) -> list[list[float]]:
    """n vertices evenly spaced on a circle at height z."""
    angles = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False)
    return [[radius * np.cos(a), radius * np.sin(a), z] for a in angles]


class StubFitter:
    """Block fitter returning fixed blocks and recording every call."""

    def __init__(self, hull_sizes=(3, 5), error: Exception | None = None):
        self.hull_sizes = list(hull_sizes)
        self.error = error
        self.calls: list[dict] = []

    def fit(self, cloud, origin, look_dir, config):
        self.calls.append({
            "cloud": cloud, "origin": np.array(origin), "look_dir": np.array(look_dir),
            "config": config,
        })
        if self.error is not None:
            raise self.error
        return [
            PlanarBlock(
                size=[1.0 + i, 2.0, 0.01],
                pose=Pose(position=[float(i), 0.0, 0.0]),
                hull=square_hull(n, z=0.1 * i),
            )
            for i, n in enumerate(self.hull_sizes)
        ]


@pytest.fixture
def stub_fitter() -> StubFitter:
    return StubFitter()


@pytest.fixture
def make_fitter():
    """Factory for stub fitters with custom hull sizes or a raised error."""
    return StubFitter


@pytest.fixture
def fixed_clock():
    return lambda: 1234.5


@pytest.fixture
def sample_cloud() -> LabeledCloud:
    rng = np.random.default_rng(0)
    points = np.column_stack([
        rng.uniform(0, 2, 200),
        rng.uniform(-1, 1, 200),
        rng.normal(0, 0.002, 200),
    ])
    return LabeledCloud(points=points)


def write_ascii_pcd(path: Path, points: np.ndarray, labels=None) -> Path:
    """Write an ASCII PCD v0.7 file with x y z fields, plus an int label field if given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    labeled = labels is not None
    if labeled:
        fields = "FIELDS x y z label\nSIZE 4 4 4 4\nTYPE F F F I\nCOUNT 1 1 1 1\n"
    else:
        fields = "FIELDS x y z\nSIZE 4 4 4\nTYPE F F F\nCOUNT 1 1 1\n"
    header = (
        "# .PCD v0.7 - Point Cloud Data file format\n"
        "VERSION 0.7\n"
        f"{fields}"
        f"WIDTH {len(points)}\n"
        "HEIGHT 1\n"
        "VIEWPOINT 0 0 0 1 0 0 0\n"
        f"POINTS {len(points)}\n"
        "DATA ascii\n"
    )
    rows = [f"{x:.6f} {y:.6f} {z:.6f}" for x, y, z in points]
    if labeled:
        rows = [f"{row} {int(label)}" for row, label in zip(rows, labels)]
    body = "\n".join(rows)
    path.write_text(header + body + "\n")
    return path


@pytest.fixture
def dataset_root(tmp_path: Path) -> Path:
    """Data root with a small .pcd cloud and a stray .txt file."""
    root = tmp_path / "data"
    points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
    write_ascii_pcd(root / "terrain" / "square.pcd", points)
    (root / "terrain" / "notes.txt").write_text("not a cloud\n")
    return root


@pytest.fixture
def dataset_config(dataset_root: Path) -> DatasetImportConfig:
    return DatasetImportConfig(
        data_root=dataset_root,
        presets=[
            DatasetPreset(
                name="square", path=Path("terrain/square.pcd"),
                origin=(0.0, 0.0, 1.0), look_dir=(1.0, 0.0, 0.0),
            ),
            DatasetPreset(
                name="notes", path=Path("terrain/notes.txt"),
                origin=(0.0, 0.0, 1.0), look_dir=(1.0, 0.0, 0.0),
            ),
            DatasetPreset(
                name="missing", path=Path("terrain/missing.pcd"),
                origin=(0.0, 0.0, 1.0), look_dir=(1.0, 0.0, 0.0),
            ),
        ],
    )


@pytest.fixture
def interface_config(dataset_config: DatasetImportConfig) -> InterfaceConfig:
    return InterfaceConfig(dataset=dataset_config)



@pytest.fixture
def labeled_pcd(tmp_path: Path) -> Path:
    """Three-point PCD with an int ``label`` field (labels 7, 7, 2)."""
    points = np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.1], [2.0, 1.0, 0.3]])
    return write_ascii_pcd(tmp_path / "labeled.pcd", points, labels=[7, 7, 2])
