from .angle_feedback import (
    AngleFeedbackEvaluator,
    AngleRange,
    AngleVerdict,
    LimbConfig,
    LimbFeedback,
    StrokeStyle,
    default_limbs,
    format_angle_text,
)

__all__ = [
    'AngleFeedbackEvaluator',
    'AngleRange',
    'AngleVerdict',
    'LimbConfig',
    'LimbFeedback',
    'StrokeStyle',
    'default_limbs',
    'format_angle_text',
]
