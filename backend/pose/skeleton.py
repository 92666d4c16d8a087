"""
Skeleton tables for the supported pose models.

Keypoint order, left/right/middle grouping and adjacent pairs follow the
pose-detection model outputs: MoveNet and PoseNet emit the 17 COCO keypoints,
BlazePose emits 33.
"""

from typing import Dict, List, Tuple

COCO17_NAMES = [
    "nose",
    "left_eye",
    "right_eye",
    "left_ear",
    "right_ear",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
]

BLAZEPOSE_NAMES = [
    "nose",
    "left_eye_inner",
    "left_eye",
    "left_eye_outer",
    "right_eye_inner",
    "right_eye",
    "right_eye_outer",
    "left_ear",
    "right_ear",
    "mouth_left",
    "mouth_right",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_pinky",
    "right_pinky",
    "left_index",
    "right_index",
    "left_thumb",
    "right_thumb",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
    "left_heel",
    "right_heel",
    "left_foot_index",
    "right_foot_index",
]

COCO17_PAIRS = [
    (0, 1), (0, 2), (1, 3), (2, 4), (5, 6), (5, 7), (5, 11), (6, 8),
    (6, 12), (7, 9), (8, 10), (11, 12), (11, 13), (12, 14), (13, 15), (14, 16),
]

BLAZEPOSE_PAIRS = [
    (0, 1), (0, 4), (1, 2), (2, 3), (3, 7), (4, 5), (5, 6), (6, 8),
    (9, 10), (11, 12), (11, 13), (11, 23), (12, 14), (14, 16), (12, 24),
    (13, 15), (15, 17), (16, 18), (16, 20), (15, 19), (15, 21), (16, 22),
    (17, 19), (18, 20), (23, 25), (23, 24), (24, 26), (25, 27), (26, 28),
    (27, 29), (28, 30), (27, 31), (28, 32), (29, 31), (30, 32),
]

MODEL_ALIASES = {
    "movenet": "coco17",
    "posenet": "coco17",
    "blazepose": "blazepose",
}

_NAMES = {"coco17": COCO17_NAMES, "blazepose": BLAZEPOSE_NAMES}
_PAIRS = {"coco17": COCO17_PAIRS, "blazepose": BLAZEPOSE_PAIRS}


def _layout(model: str) -> str:
    key = (model or "").lower()
    if key not in MODEL_ALIASES:
        raise ValueError(
            f"Unknown pose model {model!r}; expected one of {sorted(MODEL_ALIASES)}"
        )
    return MODEL_ALIASES[key]


def keypoint_names(model: str) -> List[str]:
    return _NAMES[_layout(model)]


def adjacent_pairs(model: str) -> List[Tuple[int, int]]:
    """Index pairs that make up the skeleton lines for a model."""
    return _PAIRS[_layout(model)]


def keypoint_index_by_side(model: str) -> Dict[str, List[int]]:
    """Group keypoint indices into 'left', 'right' and 'middle'."""
    groups: Dict[str, List[int]] = {"left": [], "right": [], "middle": []}
    for i, name in enumerate(keypoint_names(model)):
        if name.startswith("left_") or name.endswith("_left"):
            groups["left"].append(i)
        elif name.startswith("right_") or name.endswith("_right"):
            groups["right"].append(i)
        else:
            groups["middle"].append(i)
    return groups
