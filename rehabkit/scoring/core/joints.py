"""
Joint reference tables for RehabKit.

Ideal angle bands per exercise and the lookup used to read one logical
joint ("knee", "hip", ...) out of a frame that may only carry per-side
readings ("leftKnee", "rightKnee").
"""

from typing import Dict, List, Optional, Sequence

from .data_types import AngleSample, ExerciseKind, FrameRecord, IdealRange


IDEAL_ANGLES: Dict[ExerciseKind, Dict[str, IdealRange]] = {
    ExerciseKind.KNEE_BEND: {
        "knee": IdealRange(min=70, max=120, optimal=90),
        "hip": IdealRange(min=160, max=180, optimal=170),
        "ankle": IdealRange(min=80, max=100, optimal=90),
    },
    ExerciseKind.LEG_RAISE: {
        "hip": IdealRange(min=60, max=120, optimal=90),
        "knee": IdealRange(min=160, max=180, optimal=170),
        "ankle": IdealRange(min=80, max=100, optimal=90),
    },
    ExerciseKind.HIP_FLEX: {
        "hip": IdealRange(min=60, max=120, optimal=90),
        "knee": IdealRange(min=160, max=180, optimal=170),
    },
}

# Left/right pairs compared by the symmetry score.
SYMMETRY_PAIRS = [
    ("leftKnee", "rightKnee"),
    ("leftHip", "rightHip"),
    ("leftElbow", "rightElbow"),
    ("leftShoulder", "rightShoulder"),
    ("leftAnkle", "rightAnkle"),
]


def rest_angle(joint: str) -> float:
    """Angle of a joint at rest: arms hang at 0, everything else is straight."""
    return 0.0 if joint == "shoulder" else 180.0


def resolve_joint_angle(angles: Optional[AngleSample], joint: str) -> Optional[float]:
    """
    Read a logical joint from one frame.

    Tries ``<joint>Angle`` then ``<joint>``. If neither carries a non-zero
    reading, falls back to the side that moved farther from rest.
    """
    if not angles:
        return None

    angle = angles.get(f"{joint}Angle") or angles.get(joint)
    if angle is None or angle == 0:
        side = joint[:1].upper() + joint[1:]
        left = angles.get(f"left{side}")
        right = angles.get(f"right{side}")
        if left is not None or right is not None:
            rest = rest_angle(joint)
            l = left if left is not None else rest
            r = right if right is not None else rest
            angle = l if abs(l - rest) > abs(r - rest) else r
    return angle


def joint_series(frames: Sequence[FrameRecord], joint: str) -> List[float]:
    """Usable readings of ``joint`` across frames; zero readings are dropped except for shoulders."""
    series = []
    for frame in frames:
        angle = resolve_joint_angle(frame.angles, joint)
        if angle is None:
            continue
        if angle == 0 and joint != "shoulder":
            continue
        series.append(float(angle))
    return series
