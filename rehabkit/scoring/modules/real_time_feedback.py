"""
Real-Time Feedback Module for RehabKit.

Per-frame corrections shown to the patient while they exercise:
1. Joint corrections against the exercise's ideal angle bands
2. Movement speed over the last second
3. Jerky movement between consecutive frames

    quality = 100 - 30 (error) or 15 (warning)
                  - 10 (speed not optimal)
                  - 5 per jerky joint

Author: RehabKit Team
Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from enum import Enum

from ..core.data_types import AngleSample, ExerciseKind, IdealRange
from ..core.joints import IDEAL_ANGLES, resolve_joint_angle
from ..utils.numeric import clamp, round_half_up


# Degrees of slack around the ideal band and around the optimal angle.
JOINT_TOLERANCE = 10

# Largest angle change between two frames before it counts as jerky.
MAX_FRAME_CHANGE = 15

# Comfortable pace for rehab movements, degrees per second.
MIN_SPEED = 20
MAX_SPEED = 80

SPEED_WINDOW_MS = 1000

MESSAGE_GOOD_FORM = "Excellent form!"
MESSAGE_NO_POSE = "Unable to detect pose"


class FeedbackSeverity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class CorrectionDirection(str, Enum):
    EXTEND = "extend"
    FLEX = "flex"
    MAINTAIN = "maintain"


@dataclass
class JointFeedback:
    """Verdict on one joint. ``correction`` is None when the angle is fine."""
    correction: Optional[str]
    severity: FeedbackSeverity
    direction: CorrectionDirection


@dataclass
class RealTimeFeedback:
    """
    Frame-level form feedback.

    Attributes:
        message: Text shown to the patient.
        severity: Worst severity among the corrections.
        audio_cue: Cue to play ("success", "info", "warning") or None.
        visual_cue: Overlay color ("green", "yellow", "red") or None.
        corrections: One message per joint outside its band.
    """
    message: str
    severity: FeedbackSeverity
    audio_cue: Optional[str] = None
    visual_cue: Optional[str] = None
    corrections: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "severity": self.severity.value,
            "audio_cue": self.audio_cue,
            "visual_cue": self.visual_cue,
            "corrections": list(self.corrections),
        }


@dataclass
class SpeedAnalysis:
    speed: int = 0
    feedback: str = "Insufficient data"
    is_optimal: bool = False

    def to_dict(self) -> dict:
        return {"speed": self.speed, "feedback": self.feedback, "is_optimal": self.is_optimal}


@dataclass
class FormDeviation:
    joint: str
    change: float
    message: str
    severity: FeedbackSeverity = FeedbackSeverity.WARNING

    def to_dict(self) -> dict:
        return {
            "joint": self.joint,
            "change": self.change,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass
class FeedbackReport:
    """Everything the patient sees for one frame."""
    real_time: RealTimeFeedback
    speed: SpeedAnalysis
    deviations: List[FormDeviation] = field(default_factory=list)
    overall_quality: int = 0

    def to_dict(self) -> dict:
        return {
            "real_time": self.real_time.to_dict(),
            "speed": self.speed.to_dict(),
            "deviations": [d.to_dict() for d in self.deviations],
            "overall_quality": self.overall_quality,
        }


def analyze_joint_angle(angle: float, ideal: IdealRange, joint: str) -> JointFeedback:
    """
    Compare one joint against its ideal band.

    Outside the band by more than the tolerance is an error. Inside it but
    more than the tolerance away from the optimal angle is a warning.
    """
    shown = f"{angle:g}°"
    optimal = f"{ideal.optimal:g}°"

    if angle < ideal.min - JOINT_TOLERANCE:
        return JointFeedback(
            correction=f"{joint}: Extend more ({shown} → {optimal})",
            severity=FeedbackSeverity.ERROR,
            direction=CorrectionDirection.EXTEND,
        )

    if angle > ideal.max + JOINT_TOLERANCE:
        return JointFeedback(
            correction=f"{joint}: Flex more ({shown} → {optimal})",
            severity=FeedbackSeverity.ERROR,
            direction=CorrectionDirection.FLEX,
        )

    if abs(angle - ideal.optimal) > JOINT_TOLERANCE:
        return JointFeedback(
            correction=f"{joint}: Adjust to {optimal} (currently {shown})",
            severity=FeedbackSeverity.WARNING,
            direction=CorrectionDirection.EXTEND if angle < ideal.optimal else CorrectionDirection.FLEX,
        )

    return JointFeedback(correction=None, severity=FeedbackSeverity.SUCCESS, direction=CorrectionDirection.MAINTAIN)


def generate_real_time_feedback(angles: Optional[AngleSample], exercise) -> RealTimeFeedback:
    """
    Joint-by-joint corrections for one frame.

    Args:
        angles: Joint angles of the frame.
        exercise: Exercise label or ExerciseKind.

    Returns:
        RealTimeFeedback: An error with "Unable to detect pose" when there
        is no pose or the exercise has no ideal-angle table.
    """
    ideal_ranges = IDEAL_ANGLES.get(ExerciseKind.from_label(exercise))
    if not angles or not ideal_ranges:
        return RealTimeFeedback(message=MESSAGE_NO_POSE, severity=FeedbackSeverity.ERROR)

    corrections = []
    severity = FeedbackSeverity.SUCCESS

    for joint, ideal in ideal_ranges.items():
        angle = resolve_joint_angle(angles, joint)
        if angle is None or (angle == 0 and joint != "shoulder"):
            continue

        verdict = analyze_joint_angle(float(angle), ideal, joint)
        if verdict.correction is None:
            continue
        corrections.append(verdict.correction)
        if verdict.severity is FeedbackSeverity.ERROR:
            severity = FeedbackSeverity.ERROR
        elif severity is not FeedbackSeverity.ERROR:
            severity = FeedbackSeverity.WARNING

    if not corrections:
        return RealTimeFeedback(
            message=MESSAGE_GOOD_FORM, severity=FeedbackSeverity.SUCCESS,
            audio_cue="success", visual_cue="green",
        )

    if len(corrections) == 1:
        is_error = severity is FeedbackSeverity.ERROR
        return RealTimeFeedback(
            message=corrections[0], severity=severity,
            audio_cue="warning" if is_error else "info",
            visual_cue="red" if is_error else "yellow",
            corrections=corrections,
        )

    return RealTimeFeedback(
        message=f"Multiple corrections needed: {', '.join(corrections[:2])}",
        severity=FeedbackSeverity.ERROR,
        audio_cue="warning", visual_cue="red",
        corrections=corrections,
    )


def analyze_movement_speed(
    angle_history: Optional[Sequence[float]],
    time_window_ms: float = SPEED_WINDOW_MS,
) -> SpeedAnalysis:
    """Net angle change across the window, in degrees per second."""
    if not angle_history or len(angle_history) < 2:
        return SpeedAnalysis()

    speed = abs(float(angle_history[-1]) - float(angle_history[0])) / (time_window_ms / 1000)

    if speed < MIN_SPEED:
        feedback, is_optimal = "Move faster", False
    elif speed > MAX_SPEED:
        feedback, is_optimal = "Slow down", False
    else:
        feedback, is_optimal = "Good pace", True

    return SpeedAnalysis(speed=round_half_up(speed), feedback=feedback, is_optimal=is_optimal)


def detect_form_deviations(
    angles: Optional[AngleSample],
    previous_angles: Optional[AngleSample] = None,
) -> List[FormDeviation]:
    """Joints whose angle jumped by more than MAX_FRAME_CHANGE since the previous frame."""
    deviations: List[FormDeviation] = []
    if not angles:
        return deviations

    previous_angles = previous_angles or {}
    for joint, angle in angles.items():
        if angle is None:
            continue
        previous = previous_angles.get(joint) or angle
        change = abs(float(angle) - float(previous))
        if change > MAX_FRAME_CHANGE:
            deviations.append(FormDeviation(
                joint=joint,
                change=change,
                message=f"Jerky movement detected at {joint}",
            ))

    return deviations


def calculate_overall_quality(
    real_time: RealTimeFeedback,
    speed: SpeedAnalysis,
    deviations: Sequence[FormDeviation],
) -> int:
    score = 100
    if real_time.severity is FeedbackSeverity.ERROR:
        score -= 30
    elif real_time.severity is FeedbackSeverity.WARNING:
        score -= 15

    if not speed.is_optimal:
        score -= 10

    score -= len(deviations) * 5
    return int(clamp(score))


def generate_feedback_report(
    angles: Optional[AngleSample],
    exercise,
    angle_history: Optional[Sequence[float]] = None,
    previous_angles: Optional[AngleSample] = None,
) -> FeedbackReport:
    """
    Combine joint corrections, pace and jerkiness for one frame.

    Args:
        angles: Joint angles of the frame.
        exercise: Exercise label or ExerciseKind.
        angle_history: Driving-angle readings over the last second.
        previous_angles: Angles of the previous frame.
    """
    real_time = generate_real_time_feedback(angles, exercise)
    speed = analyze_movement_speed(angle_history)
    deviations = detect_form_deviations(angles, previous_angles)

    return FeedbackReport(
        real_time=real_time,
        speed=speed,
        deviations=deviations,
        overall_quality=calculate_overall_quality(real_time, speed, deviations),
    )
