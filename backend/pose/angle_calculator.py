"""
Joint angle calculation from 2D keypoints.
"""

import numpy as np

from .keypoints import Keypoint


def compute_angle(proximal: Keypoint, vertex: Keypoint, distal: Keypoint) -> float:
    """
    Interior angle at `vertex` in degrees, folded into [0, 180].

    The value does not depend on the winding of the three points, so mirrored
    frames and swapped outer points give the same result. Score is ignored.
    A zero-length ray falls back to atan2(0, 0) = 0 and does not raise.
    """
    radians = (
        np.arctan2(distal.y - vertex.y, distal.x - vertex.x)
        - np.arctan2(proximal.y - vertex.y, proximal.x - vertex.x)
    )
    degrees = (float(np.degrees(radians)) + 360.0) % 360.0
    if degrees > 180.0:
        degrees = 360.0 - degrees
    return degrees
