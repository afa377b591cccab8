"""
Core Module for RehabKit scoring.

Data types, joint tables and the exercise phase classifier.
"""

from .data_types import (
    AngleSample, ExerciseKind, ExerciseState, FrameRecord, IdealRange, PhaseLike,
    KneeBendPhase, LegRaisePhase, HipFlexPhase,
    KneeBendThresholds, LegRaiseThresholds, HipFlexThresholds,
    RangeOfMotion, SessionScore,
)
from .joints import IDEAL_ANGLES, SYMMETRY_PAIRS, resolve_joint_angle, joint_series
from .classifier import (
    calculate_form_quality, assess_knee_bend, assess_leg_raise, assess_hip_flex,
    has_required_joints, FEEDBACK_NO_POSE, FEEDBACK_NOT_RECOGNIZED,
)

__all__ = [
    # Data types
    'AngleSample', 'ExerciseKind', 'ExerciseState', 'FrameRecord', 'IdealRange', 'PhaseLike',
    'KneeBendPhase', 'LegRaisePhase', 'HipFlexPhase',
    'KneeBendThresholds', 'LegRaiseThresholds', 'HipFlexThresholds',
    'RangeOfMotion', 'SessionScore',

    # Joints
    'IDEAL_ANGLES', 'SYMMETRY_PAIRS', 'resolve_joint_angle', 'joint_series',

    # Classifier
    'calculate_form_quality', 'assess_knee_bend', 'assess_leg_raise', 'assess_hip_flex',
    'has_required_joints', 'FEEDBACK_NO_POSE', 'FEEDBACK_NOT_RECOGNIZED',
]
