"""Visualization utilities for offline debugging of hull outputs."""

from __future__ import annotations

from pathlib import Path

import numpy as np


def plot_hulls(
    visualization,
    cloud_points: np.ndarray | None = None,
    title: str = "Planar Block Hulls",
    max_points: int = 50000,
    save_path: Path | None = None,
):
    """Plot hull outlines (and optionally the input cloud) in 3D with matplotlib.

    ``visualization`` is a VisualizationOutput; each marker segment is drawn
    in its own color, hull vertices as colored dots.
    """
    import matplotlib
    if save_path:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig = plt.figure(figsize=(12, 10))
    ax = fig.add_subplot(111, projection="3d")

    if cloud_points is not None and len(cloud_points):
        if len(cloud_points) > max_points:
            indices = np.random.default_rng(42).choice(len(cloud_points), max_points, replace=False)
            cloud_points = cloud_points[indices]
        ax.scatter(
            cloud_points[:, 0], cloud_points[:, 1], cloud_points[:, 2],
            c="lightgray", s=0.3, alpha=0.4,
        )

    hull_cloud = visualization.hull_cloud
    if hull_cloud.num_points:
        pts = hull_cloud.points
        ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], c=hull_cloud.colors / 255.0, s=6)

    markers = visualization.hull_markers
    for k in range(markers.num_segments):
        seg = markers.points[2 * k:2 * k + 2]
        ax.plot(seg[:, 0], seg[:, 1], seg[:, 2], color=markers.colors[2 * k], linewidth=1.5)

    ax.set_title(title)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(str(save_path), dpi=150, bbox_inches="tight")
    else:
        plt.show()
    plt.close(fig)
    return fig
