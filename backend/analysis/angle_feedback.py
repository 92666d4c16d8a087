"""
Angle Feedback Evaluator
Classifies limb angles against per-limb acceptable ranges and turns the
verdicts into stroke styles and display text for the renderer.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pose import Keypoint, PoseResult, compute_angle

logger = logging.getLogger(__name__)

JointTriple = Tuple[Keypoint, Keypoint, Keypoint]


@dataclass(frozen=True)
class AngleRange:
    """Closed interval of acceptable angles, in degrees."""
    low: float
    high: float

    def __post_init__(self):
        if self.low > self.high:
            raise ValueError(f"AngleRange low ({self.low}) must not exceed high ({self.high})")

    def contains(self, angle: float) -> bool:
        return self.low <= angle <= self.high


@dataclass(frozen=True)
class AngleVerdict:
    """Angle at the vertex plus whether it sits inside the limb's range."""
    angle_degrees: float
    in_range: bool


@dataclass(frozen=True)
class StrokeStyle:
    color: str
    line_width: float


@dataclass(frozen=True)
class LimbConfig:
    """A limb to evaluate: display label, keypoint names and acceptable range."""
    name: str
    label: str
    joints: Tuple[str, str, str]  # (proximal, vertex, distal)
    angle_range: AngleRange


@dataclass(frozen=True)
class LimbFeedback:
    """Feedback for one limb in one frame."""
    limb: LimbConfig
    points: JointTriple
    verdict: AngleVerdict
    style: StrokeStyle
    text: str


def default_limbs(
    left_arm: AngleRange = AngleRange(15, 100),
    right_arm: AngleRange = AngleRange(15, 100),
) -> List[LimbConfig]:
    """Both arms, measured at the elbow."""
    return [
        LimbConfig('left_arm', 'left arm', ('left_shoulder', 'left_elbow', 'left_wrist'), left_arm),
        LimbConfig('right_arm', 'right arm', ('right_shoulder', 'right_elbow', 'right_wrist'), right_arm),
    ]


def format_angle_text(limb: LimbConfig, verdict: AngleVerdict) -> str:
    return f"Angle {limb.label}: {verdict.angle_degrees:.2f} degrees"


class AngleFeedbackEvaluator:
    """
    Stateless evaluator: one rule for every limb.

    A limb is in range when its angle lies in the closed interval of its own
    AngleRange. Callers wanting different behaviour per limb pass a different
    range rather than a different comparison.
    """

    def __init__(
        self,
        limbs: Optional[Sequence[LimbConfig]] = None,
        score_threshold: float = 0.0,
        in_range_color: str = "#008000",
        out_of_range_color: str = "#0000ff",
        line_width: float = 2,
    ):
        """
        Args:
            limbs: Limbs evaluated by evaluate_pose (defaults to both arms)
            score_threshold: Minimum keypoint confidence for a verdict
            in_range_color: Stroke color for limbs inside their range
            out_of_range_color: Stroke color for limbs outside their range
            line_width: Stroke width for limb lines
        """
        self.limbs = list(limbs) if limbs is not None else default_limbs()
        self.score_threshold = score_threshold
        self.in_range_color = in_range_color
        self.out_of_range_color = out_of_range_color
        self.line_width = line_width

    @staticmethod
    def compute_angle(proximal: Keypoint, vertex: Keypoint, distal: Keypoint) -> float:
        return compute_angle(proximal, vertex, distal)

    @staticmethod
    def classify(
        triple: JointTriple,
        angle_range: AngleRange,
        score_threshold: float = 0.0,
    ) -> Optional[AngleVerdict]:
        """
        Classify one joint triple.

        Returns None when any keypoint carries a score below the threshold;
        that is "no data for this limb this frame", not an error. Keypoints
        without a score are never gated.
        """
        if not all(kp.passes(score_threshold) for kp in triple):
            return None
        angle = compute_angle(*triple)
        return AngleVerdict(angle_degrees=angle, in_range=angle_range.contains(angle))

    def style_for(self, verdict: AngleVerdict) -> StrokeStyle:
        color = self.in_range_color if verdict.in_range else self.out_of_range_color
        return StrokeStyle(color=color, line_width=self.line_width)

    def evaluate_limb(self, pose: PoseResult, limb: LimbConfig) -> Optional[LimbFeedback]:
        points = tuple(pose.get_keypoint(name) for name in limb.joints)
        if any(p is None for p in points):
            logger.debug("Skipping %s: keypoints missing", limb.name)
            return None

        verdict = self.classify(points, limb.angle_range, self.score_threshold)
        if verdict is None:
            logger.debug("Skipping %s: keypoint score below %.2f", limb.name, self.score_threshold)
            return None

        return LimbFeedback(
            limb=limb,
            points=points,
            verdict=verdict,
            style=self.style_for(verdict),
            text=format_angle_text(limb, verdict),
        )

    def evaluate_pose(self, pose: PoseResult) -> List[LimbFeedback]:
        """Feedback for every configured limb that can be measured in this pose."""
        feedback = []
        for limb in self.limbs:
            result = self.evaluate_limb(pose, limb)
            if result is not None:
                feedback.append(result)
        return feedback
