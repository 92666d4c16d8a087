"""Shared fixtures for backend tests."""

import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pose import PoseResult


SETTINGS_ENV = (
    "POSE_MODEL",
    "SCORE_THRESHOLD",
    "ENABLE_TRACKING",
    "RENDER_3D",
    "LINE_WIDTH",
    "KEYPOINT_RADIUS",
    "FLIP_HORIZONTAL",
    "LEFT_ARM_RANGE",
    "RIGHT_ARM_RANGE",
    "IN_RANGE_COLOR",
    "OUT_OF_RANGE_COLOR",
    "PORT",
)


@pytest.fixture
def arm_keypoints() -> list:
    """COCO-17 keypoints with the left elbow at 90 degrees and the right arm straight."""
    keypoints = [{"x": 150.0, "y": 40.0, "score": 0.9} for _ in range(17)]
    keypoints[5] = {"x": 100.0, "y": 100.0, "score": 0.9}   # left_shoulder
    keypoints[7] = {"x": 100.0, "y": 150.0, "score": 0.9}   # left_elbow
    keypoints[9] = {"x": 150.0, "y": 150.0, "score": 0.9}   # left_wrist
    keypoints[6] = {"x": 200.0, "y": 100.0, "score": 0.9}   # right_shoulder
    keypoints[8] = {"x": 200.0, "y": 150.0, "score": 0.9}   # right_elbow
    keypoints[10] = {"x": 200.0, "y": 200.0, "score": 0.9}  # right_wrist
    return keypoints


@pytest.fixture
def arm_pose(arm_keypoints) -> PoseResult:
    return PoseResult.from_dict({"keypoints": arm_keypoints, "id": 3})


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings variables so defaults apply."""
    for key in SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def test_client(clean_env):
    """Create a FastAPI TestClient with the app.

    Triggers startup/shutdown lifespan events so settings and the evaluator
    are initialised. 3D rendering is switched on for the point-cloud tests.
    """
    clean_env.setenv("RENDER_3D", "true")
    # Import here to avoid import-time side-effects
    from app import app
    with TestClient(app) as client:
        yield client
