"""
Frame overlay renderer.

Draws keypoints, skeleton lines and color-coded limb feedback onto a BGR
frame with OpenCV. Styles come in as explicit values; the renderer keeps no
per-draw color or width state.
"""

from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from analysis import LimbFeedback
from pose import Keypoint, PoseResult, adjacent_pairs, keypoint_index_by_side

# One color per tracked pose id (id % 20).
COLOR_PALETTE = [
    '#ffffff', '#800000', '#469990', '#e6194b', '#42d4f4', '#fabed4', '#aaffc3',
    '#9a6324', '#000075', '#f58231', '#4363d8', '#ffd8b1', '#dcbeff', '#808000',
    '#ffe119', '#911eb4', '#bfef45', '#f032e6', '#3cb44b', '#a9a9a9',
]

WHITE = '#ffffff'
GREEN = '#008000'
RED = '#ff0000'

SIDE_COLORS = {
    'middle': WHITE,
    'left': GREEN,
    'right': RED,
}

TEXT_ORIGIN = (10, 30)
TEXT_LINE_HEIGHT = 24


def hex_to_bgr(color: str) -> Tuple[int, int, int]:
    """'#rrggbb' -> (b, g, r) for OpenCV."""
    value = color.lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Expected a '#rrggbb' color, got {color!r}")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)


def pose_color(pose: PoseResult, enable_tracking: bool) -> str:
    if enable_tracking and pose.id is not None:
        return COLOR_PALETTE[pose.id % len(COLOR_PALETTE)]
    return GREEN


def _pt(kp: Keypoint) -> Tuple[int, int]:
    return (int(round(kp.x)), int(round(kp.y)))


class OverlayRenderer:
    """Draws pose results and angle feedback onto video frames."""

    def __init__(
        self,
        model: str = "movenet",
        score_threshold: float = 0.0,
        line_width: int = 2,
        radius: int = 4,
        enable_tracking: bool = False,
        flip_horizontal: bool = False,
    ):
        self.model = model
        self.score_threshold = score_threshold
        self.line_width = line_width
        self.radius = radius
        self.enable_tracking = enable_tracking
        self.flip_horizontal = flip_horizontal

    @classmethod
    def from_settings(cls, settings, model: Optional[str] = None) -> "OverlayRenderer":
        return cls(
            model=model or settings.pose_model,
            score_threshold=settings.score_threshold,
            line_width=settings.line_width,
            radius=settings.keypoint_radius,
            enable_tracking=settings.enable_tracking,
            flip_horizontal=settings.flip_horizontal,
        )

    def draw(
        self,
        frame: np.ndarray,
        poses: Sequence[PoseResult],
        feedback: Optional[Sequence[List[LimbFeedback]]] = None,
        model_changed: bool = False,
    ) -> np.ndarray:
        """
        Draw every pose (and its limb feedback) onto the frame.

        Results produced while the model was being switched belong to the old
        model and are not drawn.

        The HTTP service renders one stateless request at a time and never
        passes model_changed; a streaming caller that swaps models between
        frames should set it for frames still in flight from the old model.

        Args:
            frame: BGR image, drawn on in place
            poses: Pose results for this frame
            feedback: Per-pose limb feedback, parallel to poses
            model_changed: True while the pose model is being swapped

        Returns:
            The annotated frame
        """
        draw_results = bool(poses) and not model_changed

        if draw_results:
            for i, pose in enumerate(poses):
                self.draw_keypoints(frame, pose)
                self.draw_skeleton(frame, pose)
                if feedback is not None and i < len(feedback):
                    self.draw_limb_lines(frame, feedback[i])

        if self.flip_horizontal:
            # Camera images are mirrored. Shapes are drawn in camera
            # coordinates and flipped together with the image; text is drawn
            # afterwards so it stays readable.
            frame[:] = cv2.flip(frame, 1)

        if draw_results and feedback:
            self.draw_feedback_text(frame, [item for items in feedback for item in items])
        return frame

    def draw_keypoints(self, frame: np.ndarray, pose: PoseResult) -> None:
        groups = keypoint_index_by_side(self.model)
        outline = hex_to_bgr(WHITE)
        for side in ('middle', 'left', 'right'):
            fill = hex_to_bgr(SIDE_COLORS[side])
            for i in groups[side]:
                if i >= len(pose.keypoints):
                    continue
                kp = pose.keypoints[i]
                if not kp.passes(self.score_threshold):
                    continue
                cv2.circle(frame, _pt(kp), self.radius, fill, thickness=-1)
                cv2.circle(frame, _pt(kp), self.radius, outline, thickness=self.line_width)

    def draw_skeleton(self, frame: np.ndarray, pose: PoseResult) -> None:
        color = hex_to_bgr(pose_color(pose, self.enable_tracking))
        for i, j in adjacent_pairs(self.model):
            if i >= len(pose.keypoints) or j >= len(pose.keypoints):
                continue
            kp1, kp2 = pose.keypoints[i], pose.keypoints[j]
            if kp1.passes(self.score_threshold) and kp2.passes(self.score_threshold):
                cv2.line(frame, _pt(kp1), _pt(kp2), color, self.line_width)

    def draw_limb_lines(self, frame: np.ndarray, feedback: Sequence[LimbFeedback]) -> None:
        """Re-stroke each measured limb in its verdict color."""
        for item in feedback:
            color = hex_to_bgr(item.style.color)
            width = max(1, int(round(item.style.line_width)))
            proximal, vertex, distal = item.points
            cv2.line(frame, _pt(proximal), _pt(vertex), color, width)
            cv2.line(frame, _pt(vertex), _pt(distal), color, width)

    def draw_feedback_text(self, frame: np.ndarray, feedback: Sequence[LimbFeedback]) -> None:
        x, y = TEXT_ORIGIN
        for item in feedback:
            cv2.putText(frame, item.text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                        hex_to_bgr(item.style.color), 1)
            y += TEXT_LINE_HEIGHT
