"""Unit tests for the OpenCV frame overlay."""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from analysis import AngleFeedbackEvaluator
from config import load_settings
from pose import PoseResult
from render import COLOR_PALETTE, OverlayRenderer, hex_to_bgr, pose_color


@pytest.fixture
def blank_frame():
    return np.zeros((240, 320, 3), dtype=np.uint8)


def pixel(frame, x, y):
    return tuple(int(c) for c in frame[y, x])


# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------

class TestColors:
    def test_hex_to_bgr(self):
        assert hex_to_bgr("#ff8000") == (0, 128, 255)
        assert hex_to_bgr("0000ff") == (255, 0, 0)

    def test_hex_to_bgr_rejects_names(self):
        with pytest.raises(ValueError):
            hex_to_bgr("Green")

    def test_palette_by_pose_id_when_tracking(self, arm_pose):
        assert pose_color(arm_pose, enable_tracking=True) == COLOR_PALETTE[3]

    def test_palette_wraps(self):
        pose = PoseResult(keypoints=[], id=23)
        assert pose_color(pose, enable_tracking=True) == COLOR_PALETTE[3]

    def test_green_without_tracking(self, arm_pose):
        assert pose_color(arm_pose, enable_tracking=False) == "#008000"


# ---------------------------------------------------------------------------
# OverlayRenderer.draw
# ---------------------------------------------------------------------------


@pytest.fixture
def lone_wrist_pose(arm_keypoints):
    """Only the left wrist (150, 150) is confident enough to draw at threshold 0.5."""
    for k in arm_keypoints:
        k["score"] = 0.1
    arm_keypoints[9]["score"] = 0.9
    return PoseResult.from_dict({"keypoints": arm_keypoints})


class TestDraw:
    def test_left_keypoint_filled_green(self, blank_frame, lone_wrist_pose):
        frame = OverlayRenderer(score_threshold=0.5).draw(blank_frame, [lone_wrist_pose])
        assert pixel(frame, 150, 150) == hex_to_bgr("#008000")
        # nothing else passes the threshold
        assert not frame[:, :100].any()

    def test_limbs_restroked_in_verdict_colors(self, blank_frame, arm_pose):
        evaluator = AngleFeedbackEvaluator(in_range_color="#00ff00", out_of_range_color="#0000ff")
        frame = OverlayRenderer().draw(blank_frame, [arm_pose], [evaluator.evaluate_pose(arm_pose)])

        # left upper arm (in range)
        assert pixel(frame, 100, 125) == hex_to_bgr("#00ff00")
        # right forearm (out of range)
        assert pixel(frame, 200, 175) == hex_to_bgr("#0000ff")

    def test_skeleton_without_feedback_uses_pose_color(self, blank_frame, arm_pose):
        frame = OverlayRenderer(enable_tracking=True).draw(blank_frame, [arm_pose])
        assert pixel(frame, 100, 125) == hex_to_bgr(COLOR_PALETTE[3])

    def test_model_change_skips_results(self, blank_frame, arm_pose):
        frame = OverlayRenderer().draw(blank_frame, [arm_pose], model_changed=True)
        assert not frame.any()

    def test_no_poses_leaves_frame(self, blank_frame):
        assert not OverlayRenderer().draw(blank_frame, []).any()

    def test_low_confidence_points_not_drawn(self, blank_frame, arm_keypoints):
        for k in arm_keypoints:
            k["score"] = 0.1
        pose = PoseResult.from_dict({"keypoints": arm_keypoints})
        frame = OverlayRenderer(score_threshold=0.5).draw(blank_frame, [pose])
        assert not frame.any()

    def test_unscored_keypoint_drawn_above_unit_threshold(self, blank_frame, arm_keypoints):
        del arm_keypoints[9]["score"]
        pose = PoseResult.from_dict({"keypoints": arm_keypoints})
        frame = OverlayRenderer(score_threshold=1.5).draw(blank_frame, [pose])
        # same gate as classify: only the unscored left wrist is drawn
        assert pixel(frame, 150, 150) == hex_to_bgr("#008000")
        assert not frame[:, :100].any()

    def test_flip_mirrors_shapes(self, blank_frame, lone_wrist_pose):
        frame = OverlayRenderer(score_threshold=0.5, flip_horizontal=True).draw(blank_frame, [lone_wrist_pose])
        width = frame.shape[1]
        assert pixel(frame, width - 1 - 150, 150) == hex_to_bgr("#008000")
        assert pixel(frame, 150, 150) == (0, 0, 0)

    def test_feedback_text_drawn(self, arm_pose):
        feedback = [AngleFeedbackEvaluator().evaluate_pose(arm_pose)]
        with_text = OverlayRenderer().draw(np.zeros((240, 320, 3), np.uint8), [arm_pose], feedback)
        without = OverlayRenderer().draw(np.zeros((240, 320, 3), np.uint8), [arm_pose])

        # text band above the highest keypoint (y=40)
        assert with_text[10:33, 10:140].any()
        assert not without[10:33, 10:140].any()

    def test_from_settings(self):
        settings = load_settings({"POSE_MODEL": "blazepose", "KEYPOINT_RADIUS": "6"})
        renderer = OverlayRenderer.from_settings(settings)
        assert renderer.model == "blazepose"
        assert renderer.radius == 6
        assert OverlayRenderer.from_settings(settings, model="movenet").model == "movenet"
