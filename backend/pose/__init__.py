from .keypoints import Keypoint, PoseResult
from .angle_calculator import compute_angle
from .skeleton import adjacent_pairs, keypoint_index_by_side, keypoint_names

__all__ = [
    'Keypoint',
    'PoseResult',
    'compute_angle',
    'adjacent_pairs',
    'keypoint_index_by_side',
    'keypoint_names',
]
