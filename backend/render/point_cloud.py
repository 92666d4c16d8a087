"""
3D keypoint point-cloud snapshots.

Renders a pose's 3D keypoints as a scatter plot with skeleton polylines and
saves a PNG, so the service is never blocked by a GUI window.

Usage:
    from render.point_cloud import plot_point_cloud
    plot_point_cloud(pose, out_path="pose3d.png")
"""

import os
from typing import List, Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use("Agg")                        # no GUI backend
import matplotlib.pyplot as plt

import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pose import Keypoint, PoseResult, adjacent_pairs, keypoint_index_by_side

# ── Anchor points keep the cloud scaled to its position in the input ───
ANCHOR_POINTS = [[0, 0, 0], [0, 1, 0], [-1, 0, 0], [-1, -1, 0]]

# ── Point colours ──────────────────────────────────────────────────────
HIDDEN_COLOR = "#ffffff"     # anchors and low-confidence points
NOSE_COLOR = "#ff0000"
SIDE_COLOR = "#00ff00"

PLOT_DIR = "point_clouds"


def point_cloud_dataset(keypoints_3d: Sequence[Keypoint]) -> np.ndarray:
    """Negated keypoint coordinates followed by the anchor points, shape (N+4, 3)."""
    points = [[-kp.x, -kp.y, -(kp.z or 0.0)] for kp in keypoints_3d]
    return np.asarray(points + ANCHOR_POINTS, dtype=float).reshape(-1, 3)


def point_colors(
    keypoints_3d: Sequence[Keypoint],
    model: str = "movenet",
    score_threshold: float = 0.0,
) -> List[str]:
    """Colour per dataset point, parallel to point_cloud_dataset()."""
    groups = keypoint_index_by_side(model)
    sided = set(groups["left"]) | set(groups["right"])
    colors = []
    for i in range(len(keypoints_3d) + len(ANCHOR_POINTS)):
        kp = keypoints_3d[i] if i < len(keypoints_3d) else None
        if kp is None or not kp.passes(score_threshold):
            colors.append(HIDDEN_COLOR)
        elif i == 0:
            colors.append(NOSE_COLOR)
        elif i in sided:
            colors.append(SIDE_COLOR)
        else:
            colors.append(HIDDEN_COLOR)
    return colors


def plot_point_cloud(
    pose: PoseResult,
    out_path: Optional[str] = None,
    score_threshold: float = 0.0,
):
    """
    Save a 3D scatter PNG for one pose.

    Parameters
    ----------
    pose : PoseResult
        Pose with ``keypoints_3d`` set.
    out_path : str
        Target PNG path (defaults to PLOT_DIR/pose_<id>.png).
    score_threshold : float
        Points below this confidence are drawn white (hidden).

    Returns
    -------
    str  – path to the saved PNG, or None if the pose has no 3D keypoints.
    """
    if not pose.keypoints_3d:
        return None

    if out_path is None:
        out_path = os.path.join(PLOT_DIR, f"pose_{pose.id or 0:04d}.png")
    parent = os.path.dirname(out_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    data = point_cloud_dataset(pose.keypoints_3d)
    colors = point_colors(pose.keypoints_3d, pose.model, score_threshold)

    fig = plt.figure(figsize=(6, 6))
    ax = fig.add_subplot(projection="3d")
    ax.scatter(data[:, 0], data[:, 1], data[:, 2], c=colors, edgecolors="#adb5bd", s=30)

    # ── Skeleton polylines ─────────────────────────────────────────
    n = len(pose.keypoints_3d)
    for i, j in adjacent_pairs(pose.model):
        if i < n and j < n:
            ax.plot(data[[i, j], 0], data[[i, j], 1], data[[i, j], 2],
                    color="#0d6efd", lw=1.5)

    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")

    fig.savefig(out_path, dpi=100, bbox_inches="tight")
    plt.close(fig)
    return out_path
