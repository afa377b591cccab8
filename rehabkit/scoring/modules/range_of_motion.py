"""
Range of Motion Module for RehabKit.

ROM statistics over a session:
1. Plain ROM of one angle history (min / max / average / range)
2. Primary-joint ROM of an exercise, with a consistency score
3. Recommendations comparing a session against the previous one
4. Progress of the current rep against an ideal band

Author: RehabKit Team
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
from enum import Enum

import numpy as np

from ..core.data_types import ExerciseKind, FrameRecord, IdealRange, RangeOfMotion
from ..core.joints import IDEAL_ANGLES, joint_series
from ..utils.numeric import population_variance, round_half_up


# Below this many samples the ROM is reported as perfectly consistent.
MIN_CONSISTENCY_SAMPLES = 10


def track_range_of_motion(angle_history: Optional[Sequence[float]]) -> RangeOfMotion:
    """
    ROM statistics of one joint over a session.

    Args:
        angle_history: Angle readings in degrees, in capture order.

    Returns:
        RangeOfMotion: Each field rounded to whole degrees. All zeros for an
        empty or missing history.
    """
    if angle_history is None or len(angle_history) == 0:
        return RangeOfMotion()

    low = high = float(angle_history[0])
    total = 0.0
    for angle in angle_history:
        angle = float(angle)
        if angle < low:
            low = angle
        if angle > high:
            high = angle
        total += angle

    return RangeOfMotion(
        min=round_half_up(low),
        max=round_half_up(high),
        average=round_half_up(total / len(angle_history)),
        range=round_half_up(high - low),
    )


@dataclass
class JointRangeOfMotion:
    """
    ROM of an exercise's primary joint.

    Attributes:
        primary_joint: Logical joint tracked ("knee", "hip").
        min_angle / max_angle: Extremes reached (degrees).
        range_of_motion: max_angle - min_angle.
        average_angle: Mean reading.
        peak_rom: Highest angle reached.
        consistency: Stability of the range across the session (0-100).
        frame_count: Frames with a usable reading.
    """
    primary_joint: Optional[str] = None
    min_angle: int = 0
    max_angle: int = 0
    range_of_motion: int = 0
    average_angle: int = 0
    peak_rom: int = 0
    consistency: int = 0
    frame_count: int = 0

    def to_dict(self) -> dict:
        return {
            "primary_joint": self.primary_joint,
            "min_angle": self.min_angle,
            "max_angle": self.max_angle,
            "range_of_motion": self.range_of_motion,
            "average_angle": self.average_angle,
            "peak_rom": self.peak_rom,
            "consistency": self.consistency,
            "frame_count": self.frame_count,
        }


def track_joint_rom(
    frames: Optional[Sequence[FrameRecord]],
    exercise,
) -> Optional[JointRangeOfMotion]:
    """
    ROM of the exercise's primary joint across recorded frames.

    Returns:
        JointRangeOfMotion, or None if the exercise has no ideal-angle table.
    """
    if not frames:
        return JointRangeOfMotion()

    kind = ExerciseKind.from_label(exercise)
    ideal_ranges = IDEAL_ANGLES.get(kind)
    if not ideal_ranges:
        return None

    primary_joint = next(iter(ideal_ranges))
    angles = joint_series(frames, primary_joint)

    if not angles:
        return JointRangeOfMotion(primary_joint=primary_joint)

    arr = np.asarray(angles, dtype=float)
    min_angle = float(np.min(arr))
    max_angle = float(np.max(arr))

    return JointRangeOfMotion(
        primary_joint=primary_joint,
        min_angle=round_half_up(min_angle),
        max_angle=round_half_up(max_angle),
        range_of_motion=round_half_up(max_angle - min_angle),
        average_angle=round_half_up(float(np.mean(arr))),
        peak_rom=round_half_up(max_angle),
        consistency=round_half_up(calculate_rom_consistency(angles)),
        frame_count=len(angles),
    )


def calculate_rom_consistency(angles: Sequence[float]) -> float:
    """
    How stable the range is across the session (0-100).

    Slides a window of a third of the session over the readings and
    penalises variance between the window ranges.
    """
    if len(angles) < MIN_CONSISTENCY_SAMPLES:
        return 100.0

    arr = np.asarray(angles, dtype=float)
    window_size = len(arr) // 3
    roms = [
        float(np.ptp(arr[i:i + window_size]))
        for i in range(len(arr) - window_size + 1)
    ]

    if not roms:
        return 100.0

    return max(0.0, 100.0 - population_variance(roms) / 2)


class RecommendationType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"


class RecommendationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class RomRecommendation:
    type: RecommendationType
    message: str
    priority: RecommendationPriority

    def to_dict(self) -> dict:
        return {"type": self.type.value, "message": self.message, "priority": self.priority.value}


LIMITED_ROM_DEGREES = 20
LOW_CONSISTENCY = 60
ROM_CHANGE_DEGREES = 5


def generate_rom_recommendations(
    current: Optional[JointRangeOfMotion],
    previous: Optional[JointRangeOfMotion] = None,
) -> List[RomRecommendation]:
    """
    Advice derived from this session's ROM, optionally against the last one.
    """
    recommendations: List[RomRecommendation] = []

    if current is None:
        return recommendations

    if current.range_of_motion < LIMITED_ROM_DEGREES:
        recommendations.append(RomRecommendation(
            type=RecommendationType.WARNING,
            message="Limited range of motion detected. Try to move through a fuller range.",
            priority=RecommendationPriority.HIGH,
        ))

    if current.consistency < LOW_CONSISTENCY:
        recommendations.append(RomRecommendation(
            type=RecommendationType.WARNING,
            message="ROM is inconsistent. Try to maintain a steady range throughout.",
            priority=RecommendationPriority.MEDIUM,
        ))

    if previous is not None:
        improvement = current.range_of_motion - previous.range_of_motion
        if improvement > ROM_CHANGE_DEGREES:
            recommendations.append(RomRecommendation(
                type=RecommendationType.SUCCESS,
                message=f"Great! Your ROM improved by {round_half_up(improvement)}°",
                priority=RecommendationPriority.LOW,
            ))
        elif improvement < -ROM_CHANGE_DEGREES:
            recommendations.append(RomRecommendation(
                type=RecommendationType.WARNING,
                message=f"ROM decreased by {round_half_up(abs(improvement))}°. Take it easy today.",
                priority=RecommendationPriority.MEDIUM,
            ))

    return recommendations


@dataclass
class RepCompletion:
    """Progress of the rep in flight."""
    is_complete: bool = False
    progress: int = 0
    phase: str = "start"
    min_angle: Optional[int] = None
    max_angle: Optional[int] = None
    current_angle: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "is_complete": self.is_complete,
            "progress": self.progress,
            "phase": self.phase,
            "min_angle": self.min_angle,
            "max_angle": self.max_angle,
            "current_angle": self.current_angle,
        }


def calculate_rep_completion(
    angle_history: Optional[Sequence[float]],
    ideal_range: IdealRange,
) -> RepCompletion:
    """
    Estimate how far the current rep has progressed through its ideal band.

    Phases: ``start`` (0%), ``flexion`` once the low end is within 5° of the
    band (50%), ``extension`` once the high end is within 5° (100%). The rep
    is complete when both ends came within 10° of the band.
    """
    if not angle_history:
        return RepCompletion()

    current_angle = float(angle_history[-1])
    min_angle = float(min(angle_history))
    max_angle = float(max(angle_history))

    phase = "start"
    progress = 0

    if min_angle < ideal_range.min + 5:
        phase = "flexion"
        progress = 50

    if max_angle > ideal_range.max - 5:
        phase = "extension"
        progress = 100

    is_complete = min_angle < ideal_range.min + 10 and max_angle > ideal_range.max - 10

    return RepCompletion(
        is_complete=is_complete,
        progress=min(100, progress),
        phase=phase,
        min_angle=round_half_up(min_angle),
        max_angle=round_half_up(max_angle),
        current_angle=round_half_up(current_angle),
    )
