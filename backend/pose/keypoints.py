"""
Keypoint and pose containers.
Model-agnostic view of one frame of pose-detection output.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .skeleton import keypoint_names


@dataclass(frozen=True)
class Keypoint:
    """A single detected landmark. A missing score passes any threshold."""
    x: float
    y: float
    score: Optional[float] = None
    z: Optional[float] = None
    name: Optional[str] = None

    def passes(self, score_threshold: float) -> bool:
        """True if the keypoint is confident enough to be drawn or measured.

        A keypoint without a score always passes, whatever the threshold.
        """
        return self.score is None or self.score >= score_threshold


@dataclass
class PoseResult:
    """Keypoints for one detected person in one frame."""
    keypoints: List[Keypoint]
    model: str = "movenet"
    id: Optional[int] = None
    keypoints_3d: Optional[List[Keypoint]] = None
    _by_name: Dict[str, Keypoint] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        names = keypoint_names(self.model)
        for i, kp in enumerate(self.keypoints):
            name = kp.name or (names[i] if i < len(names) else None)
            if name is not None:
                self._by_name[name] = kp

    def get_keypoint(self, name: str) -> Optional[Keypoint]:
        return self._by_name.get(name)

    @classmethod
    def from_dict(cls, data: dict, model: str = "movenet") -> "PoseResult":
        """Build from a pose-detection style dict ({"keypoints": [{"x", "y", "score"}...]})."""
        def _kp(raw):
            return Keypoint(
                x=float(raw["x"]),
                y=float(raw["y"]),
                score=None if raw.get("score") is None else float(raw["score"]),
                z=None if raw.get("z") is None else float(raw["z"]),
                name=raw.get("name"),
            )

        raw_3d = data.get("keypoints3D") or data.get("keypoints_3d")
        return cls(
            keypoints=[_kp(k) for k in data.get("keypoints", [])],
            model=data.get("model", model),
            id=data.get("id"),
            keypoints_3d=[_kp(k) for k in raw_3d] if raw_3d else None,
        )
