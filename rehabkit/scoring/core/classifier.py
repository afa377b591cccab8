"""
Exercise Phase Classifier for RehabKit.

Finite state machine that maps the current joint angles plus the previous
phase to a new phase, a form quality score and a rep-completion flag.

Rep model (same for all exercises):

    START ──► TARGET ──► REST ──► TARGET ──► REST ...
                           ▲
                     rep counted here

    knee bend:  TARGET = FLEXION,  REST = EXTENSION
    leg raise:  TARGET = UP,       REST = DOWN
    hip flex:   TARGET = FLEXED,   REST = EXTENDED

A rep is only counted when the limb returns to rest after having been in
the target band, so angle noise around a single threshold cannot produce
extra reps.

The classifier is a pure function. The caller owns phase continuity, see
``ExerciseSession`` for the stateful wrapper.

Author: RehabKit Team
Version: 1.0.0
"""

from typing import Optional, Union
from enum import Enum

from .data_types import (
    AngleSample, ExerciseKind, ExerciseState, PhaseLike,
    KneeBendPhase, LegRaisePhase, HipFlexPhase,
    KneeBendThresholds, LegRaiseThresholds, HipFlexThresholds,
)


KNEE_BEND_THRESHOLDS = KneeBendThresholds()
LEG_RAISE_THRESHOLDS = LegRaiseThresholds()
HIP_FLEX_THRESHOLDS = HipFlexThresholds()

FEEDBACK_NO_POSE = "Unable to detect pose"
FEEDBACK_NOT_RECOGNIZED = "Exercise type not recognized"


def calculate_form_quality(
    angles: Optional[AngleSample],
    exercise: Union[str, ExerciseKind],
    previous_phase: PhaseLike = None,
) -> ExerciseState:
    """
    Classify one frame and score its form.

    Args:
        angles: Joint angles of the frame (``leftKnee``, ``rightHip``, ...).
        exercise: Exercise label ("knee bends", "leg-raise", ...) or kind.
        previous_phase: Phase returned for the previous frame. ``None``
            means the session just started.

    Returns:
        ExerciseState: New phase, score (0-100), feedback and rep flag.
        Never raises; degenerate input yields a zero score and leaves the
        phase unchanged.
    """
    kind = ExerciseKind.from_label(exercise)

    if not angles or not has_required_joints(angles, kind):
        return ExerciseState(
            phase=_unchanged_phase(kind, previous_phase),
            score=0,
            feedback=FEEDBACK_NO_POSE,
            rep_completed=False,
        )

    if kind is ExerciseKind.KNEE_BEND:
        return assess_knee_bend(angles, kind.parse_phase(previous_phase))
    if kind is ExerciseKind.LEG_RAISE:
        return assess_leg_raise(angles, kind.parse_phase(previous_phase))
    if kind is ExerciseKind.HIP_FLEX:
        return assess_hip_flex(angles, kind.parse_phase(previous_phase))

    return ExerciseState(
        phase=_unchanged_phase(kind, previous_phase),
        score=0,
        feedback=FEEDBACK_NOT_RECOGNIZED,
        rep_completed=False,
    )


def assess_knee_bend(
    angles: AngleSample,
    phase: KneeBendPhase = KneeBendPhase.START,
    thresholds: KneeBendThresholds = KNEE_BEND_THRESHOLDS,
) -> ExerciseState:
    """Knee bends: knee drives the cycle, hip angle checks the back."""
    knee_angle = min(angles["leftKnee"], angles["rightKnee"])
    hip_angle = min(angles["leftHip"], angles["rightHip"])

    score = 100
    feedback = "Good form!"
    rep_completed = False

    if hip_angle < thresholds.back_straight_min:
        score -= thresholds.back_penalty
        feedback = "Keep your back straight"

    if knee_angle < thresholds.deep_flexion_max:
        if phase in (KneeBendPhase.START, KneeBendPhase.EXTENSION):
            phase = KneeBendPhase.FLEXION
    elif knee_angle > thresholds.extension_min:
        if phase is KneeBendPhase.FLEXION:
            rep_completed = True
            feedback = "Great rep! Keep going"
        phase = KneeBendPhase.EXTENSION

    low, high = thresholds.shallow_band
    if low < knee_angle < high:
        score -= thresholds.shallow_penalty
        feedback = "Try bending deeper"

    return ExerciseState(phase=phase, score=max(0, score), feedback=feedback, rep_completed=rep_completed)


def assess_leg_raise(
    angles: AngleSample,
    phase: LegRaisePhase = LegRaisePhase.START,
    thresholds: LegRaiseThresholds = LEG_RAISE_THRESHOLDS,
) -> ExerciseState:
    """Leg raises: hip drives the cycle, the knee must stay straight."""
    hip_angle = min(angles["leftHip"], angles["rightHip"])
    knee_angle = min(angles["leftKnee"], angles["rightKnee"])

    score = 100
    feedback = "Good form!"
    rep_completed = False

    if knee_angle < thresholds.straight_leg_min:
        score -= thresholds.bent_leg_penalty
        feedback = "Keep your leg straight"

    if hip_angle < thresholds.raised_max:
        if phase in (LegRaisePhase.START, LegRaisePhase.DOWN):
            phase = LegRaisePhase.UP
    elif hip_angle > thresholds.lowered_min:
        if phase is LegRaisePhase.UP:
            rep_completed = True
            feedback = "Excellent! One more"
        phase = LegRaisePhase.DOWN

    low, high = thresholds.low_raise_band
    if low < hip_angle < high:
        score -= thresholds.low_raise_penalty
        feedback = "Raise your leg higher"

    return ExerciseState(phase=phase, score=max(0, score), feedback=feedback, rep_completed=rep_completed)


def assess_hip_flex(
    angles: AngleSample,
    phase: HipFlexPhase = HipFlexPhase.START,
    thresholds: HipFlexThresholds = HIP_FLEX_THRESHOLDS,
) -> ExerciseState:
    """
    Hip flexion: scored continuously by band, no rep on entering flexion.

    Bands:
        hip < 100          -> 100, FLEXED
        100 <= hip < 120   -> 80,  FLEXED
        hip > 160          -> 100, EXTENDED (rep if previously FLEXED)
        otherwise          -> 60,  phase unchanged
    """
    hip_angle = min(angles["leftHip"], angles["rightHip"])

    score = 100
    feedback = "Maintain position"
    rep_completed = False

    if hip_angle < thresholds.full_flexion_max:
        score = thresholds.full_flexion_score
        feedback = "Perfect! Hold this position"
        phase = HipFlexPhase.FLEXED
    elif hip_angle < thresholds.partial_flexion_max:
        score = thresholds.partial_flexion_score
        feedback = "Good, try to flex a bit more"
        phase = HipFlexPhase.FLEXED
    elif hip_angle > thresholds.extension_min:
        if phase is HipFlexPhase.FLEXED:
            rep_completed = True
            feedback = "Great rep!"
        phase = HipFlexPhase.EXTENDED
    else:
        score = thresholds.mid_range_score
        feedback = "Flex your hip more"

    return ExerciseState(phase=phase, score=max(0, score), feedback=feedback, rep_completed=rep_completed)


def has_required_joints(angles: AngleSample, kind: ExerciseKind) -> bool:
    for joint in kind.required_joints:
        if angles.get(joint) is None:
            return False
    return True


def _unchanged_phase(kind: ExerciseKind, previous_phase: PhaseLike) -> Optional[str]:
    if kind.phase_type is not None:
        return kind.parse_phase(previous_phase)
    if previous_phase is None:
        return "start"
    return previous_phase.value if isinstance(previous_phase, Enum) else str(previous_phase)
