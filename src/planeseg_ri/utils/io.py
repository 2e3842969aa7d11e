"""I/O utilities: point cloud files and the JSON dump of segmentation results."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from planeseg_ri.core.contracts import LabeledCloud, SegmentationResult

logger = logging.getLogger(__name__)

SUPPORTED_CLOUD_EXTENSIONS = (".pcd", ".ply")

AFFORDANCE_CLASSNAME = "BoxAffordanceItem"
AFFORDANCE_COLOR = (0.5, 0.4, 0.5)
AFFORDANCE_ALPHA = 1.0


# ── Point clouds ─────────────────────────────────────────────────────

def is_supported_cloud_file(path: Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_CLOUD_EXTENSIONS


def load_point_cloud(path: Path, frame_id: str = "odom") -> LabeledCloud:
    """Read a .pcd or .ply file into a LabeledCloud via Open3D.

    Uses the tensor reader so that an integer ``label`` field (PCL
    PointXYZL clouds) is kept as per-point labels. Open3D only warns and
    returns an empty cloud for a missing file, so the existence check is
    done here.
    """
    import open3d as o3d

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Point cloud file not found: {path}")
    if not is_supported_cloud_file(path):
        raise ValueError(f"Unsupported point cloud extension: {path.suffix}")

    pcd = o3d.t.io.read_point_cloud(str(path))
    if "positions" not in pcd.point:
        logger.warning(f"No points in {path.name}")
        return LabeledCloud(points=np.empty((0, 3)), frame_id=frame_id)

    points = pcd.point["positions"].numpy().astype(np.float64)
    labels = None
    if "label" in pcd.point:
        labels = pcd.point["label"].numpy().reshape(-1).astype(np.int64)
    suffix = " with labels" if labels is not None else ""
    logger.info(f"Loaded {len(points)} points from {path.name}{suffix}")
    return LabeledCloud(points=points, labels=labels, frame_id=frame_id)


def write_colored_cloud(path: Path, points: np.ndarray, colors: np.ndarray) -> Path:
    """Write points with uint8 RGB colors to .pcd/.ply via Open3D."""
    import open3d as o3d

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pcd = o3d.geometry.PointCloud()
    pcd.points = o3d.utility.Vector3dVector(np.asarray(points, dtype=np.float64))
    pcd.colors = o3d.utility.Vector3dVector(np.asarray(colors, dtype=np.float64) / 255.0)
    if not o3d.io.write_point_cloud(str(path), pcd):
        raise RuntimeError(f"Open3D failed to write {path}")
    logger.info(f"Saved {len(pcd.points)} colored points -> {path}")
    return path


# ── Segmentation result dump ─────────────────────────────────────────

def result_to_affordances(result: SegmentationResult, name_prefix: str = "block") -> dict:
    """One box-affordance record per block, keyed "0_1", "0_2", ... in block order.

    Color and alpha are fixed placeholders; the consumer recolors items.
    """
    records: dict[str, dict] = {}
    for i, block in enumerate(result.blocks):
        uuid = f"0_{i + 1}"
        records[uuid] = {
            "classname": AFFORDANCE_CLASSNAME,
            "pose": [list(block.pose.position), list(block.pose.orientation)],
            "uuid": uuid,
            "Dimensions": list(block.size),
            "Color": list(AFFORDANCE_COLOR),
            "Alpha": AFFORDANCE_ALPHA,
            "Name": f"{name_prefix} {i}",
        }
    return records


def dump_result_json(result: SegmentationResult, name_prefix: str = "block") -> str:
    return json.dumps(result_to_affordances(result, name_prefix), indent=2)


def write_result_json(result: SegmentationResult, path: Path, name_prefix: str = "block") -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(result_to_affordances(result, name_prefix), f, indent=2)
    logger.info(f"Saved {result.num_blocks} block records -> {path}")
    return path
