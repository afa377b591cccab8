"""
Form Analysis Module for RehabKit.

Session-level form quality, computed from all recorded frames:
1. Angle Accuracy: share of frames inside each joint's ideal band
2. Consistency: low angle variance per joint
3. Symmetry: left/right balance
4. Speed: regular frame timing

    overall = 0.4 * accuracy + 0.3 * consistency + 0.2 * symmetry + 0.1 * speed

Author: RehabKit Team
Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np

from ..core.data_types import ExerciseKind, FrameRecord
from ..core.joints import IDEAL_ANGLES, SYMMETRY_PAIRS, joint_series
from ..utils.numeric import clamp, population_variance, round_half_up
from .range_of_motion import JointRangeOfMotion, track_joint_rom
from .session_score import get_grade_from_score


SCORE_WEIGHTS = {
    "angle_accuracy": 0.4,
    "consistency": 0.3,
    "symmetry": 0.2,
    "speed": 0.1,
}

# Slack (degrees) around an ideal band before a frame counts as inaccurate.
ACCURACY_TOLERANCE = 10


@dataclass
class FormQualityReport:
    """
    Breakdown of a session's form quality.

    Attributes:
        overall_score: Weighted total (0-100).
        angle_accuracy: Accuracy component (0-100).
        consistency: Consistency component (0-100).
        symmetry: Symmetry component (0-100).
        speed: Speed component (0-100).
        frame_count: Frames analysed.
    """
    overall_score: int = 0
    angle_accuracy: int = 0
    consistency: int = 0
    symmetry: int = 0
    speed: int = 0
    frame_count: int = 0

    @property
    def breakdown(self) -> Dict[str, str]:
        return {
            "angle_accuracy": f"{self.angle_accuracy}%",
            "consistency": f"{self.consistency}%",
            "symmetry": f"{self.symmetry}%",
            "speed": f"{self.speed}%",
        }

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "angle_accuracy": self.angle_accuracy,
            "consistency": self.consistency,
            "symmetry": self.symmetry,
            "speed": self.speed,
            "breakdown": self.breakdown,
            "frame_count": self.frame_count,
        }


def calculate_form_quality_score(
    frames: Optional[Sequence[FrameRecord]],
    exercise,
) -> FormQualityReport:
    """
    Form quality of a whole session.

    Args:
        frames: Recorded frames, in capture order.
        exercise: Exercise label or ExerciseKind.

    Returns:
        FormQualityReport: All zeros for an empty session.
    """
    if not frames:
        return FormQualityReport()

    angle_accuracy = calculate_angle_accuracy(frames, exercise)
    consistency = calculate_consistency(frames)
    symmetry = calculate_symmetry(frames)
    speed = calculate_speed_score(frames)

    overall = round_half_up(
        angle_accuracy * SCORE_WEIGHTS["angle_accuracy"] +
        consistency * SCORE_WEIGHTS["consistency"] +
        symmetry * SCORE_WEIGHTS["symmetry"] +
        speed * SCORE_WEIGHTS["speed"]
    )

    return FormQualityReport(
        overall_score=int(clamp(overall)),
        angle_accuracy=round_half_up(angle_accuracy),
        consistency=round_half_up(consistency),
        symmetry=round_half_up(symmetry),
        speed=round_half_up(speed),
        frame_count=len(frames),
    )


def calculate_angle_accuracy(frames: Sequence[FrameRecord], exercise) -> float:
    """
    Mean over joints of the share of frames inside the joint's ideal band.

    Returns 0 for an exercise without an ideal-angle table.
    """
    ideal_ranges = IDEAL_ANGLES.get(ExerciseKind.from_label(exercise))
    if not ideal_ranges:
        return 0.0

    joint_scores = []
    for joint, ideal in ideal_ranges.items():
        angles = joint_series(frames, joint)
        if not angles:
            continue
        arr = np.asarray(angles)
        inside = np.count_nonzero(
            (arr >= ideal.min - ACCURACY_TOLERANCE) & (arr <= ideal.max + ACCURACY_TOLERANCE)
        )
        joint_scores.append(inside / len(arr) * 100)

    return float(np.mean(joint_scores)) if joint_scores else 0.0


def calculate_consistency(frames: Sequence[FrameRecord]) -> float:
    """
    Low variance = high consistency.

    Every angle key of the first frame is scored as
    ``max(0, 100 - variance / 2)``; keys with fewer than two non-zero
    readings are skipped.
    """
    if len(frames) < 2:
        return 100.0

    joint_scores = []
    for key in (frames[0].angles or {}):
        angles = [
            frame.angles.get(key) for frame in frames
            if frame.angles and frame.angles.get(key) not in (None, 0)
        ]
        if len(angles) < 2:
            continue
        joint_scores.append(max(0.0, 100.0 - population_variance(angles) / 2))

    return float(np.mean(joint_scores)) if joint_scores else 100.0


def calculate_symmetry(frames: Sequence[FrameRecord]) -> float:
    """
    Left/right balance: ``max(0, 100 - 2 * |mean_left - mean_right|)`` per pair.
    """
    if not frames:
        return 100.0

    pair_scores = []
    for left_key, right_key in SYMMETRY_PAIRS:
        left = _side_readings(frames, left_key)
        right = _side_readings(frames, right_key)
        if not left or not right:
            continue
        difference = abs(np.mean(left) - np.mean(right))
        pair_scores.append(max(0.0, 100.0 - difference * 2))

    return float(np.mean(pair_scores)) if pair_scores else 100.0


def calculate_speed_score(frames: Sequence[FrameRecord]) -> float:
    """
    Regular frame timing scores high; jittery delivery scores low.

    Uses the variance of positive timestamp deltas (ms):
    ``max(0, 100 - variance / 10)``.
    """
    if len(frames) < 2:
        return 100.0

    timestamps = np.asarray([frame.timestamp or 0 for frame in frames], dtype=float)
    deltas = np.diff(timestamps)
    deltas = deltas[deltas > 0]

    if deltas.size == 0:
        return 100.0

    return max(0.0, 100.0 - float(np.var(deltas)) / 10)


def _side_readings(frames: Sequence[FrameRecord], key: str):
    return [
        frame.angles[key] for frame in frames
        if frame.angles and frame.angles.get(key) not in (None, 0)
    ]


@dataclass
class SessionSummary:
    """Everything the report writer needs about one session."""
    exercise_type: str
    duration: int = 0
    rep_count: int = 0
    form_quality: FormQualityReport = field(default_factory=FormQualityReport)
    range_of_motion: Optional[JointRangeOfMotion] = None
    average_quality_score: int = 0
    grade: str = "F"

    def to_dict(self) -> dict:
        return {
            "exercise_type": self.exercise_type,
            "duration": self.duration,
            "rep_count": self.rep_count,
            "form_quality": self.form_quality.to_dict(),
            "range_of_motion": self.range_of_motion.to_dict() if self.range_of_motion else None,
            "average_quality_score": self.average_quality_score,
            "grade": self.grade,
        }


def generate_session_summary(
    frames: Sequence[FrameRecord],
    exercise,
    rep_count: int,
) -> SessionSummary:
    """
    Combine form quality, primary-joint ROM and duration for one session.

    Duration is measured in seconds between the first and last frame.
    """
    kind = ExerciseKind.from_label(exercise)
    form_quality = calculate_form_quality_score(frames, kind)
    rom = track_joint_rom(frames, kind)

    duration = 0
    if frames:
        duration = round_half_up((frames[-1].timestamp - frames[0].timestamp) / 1000)

    return SessionSummary(
        exercise_type=kind.value,
        duration=duration,
        rep_count=rep_count,
        form_quality=form_quality,
        range_of_motion=rom,
        average_quality_score=form_quality.overall_score,
        grade=get_grade_from_score(form_quality.overall_score),
    )
