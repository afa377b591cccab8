"""
Data Types Module for RehabKit.

Data classes and type definitions shared by the phase classifier,
the form scorers and the session aggregators.

Each exercise kind owns a closed phase enum and a threshold table, so a
phase of one exercise can never leak into the state machine of another.

Author: RehabKit Team
Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type, Union
from enum import Enum


# Joint id -> angle in degrees, produced once per processed frame.
AngleSample = Dict[str, float]


class KneeBendPhase(str, Enum):
    """Phases of a knee bend rep."""
    START = "start"
    FLEXION = "flexion"
    EXTENSION = "extension"


class LegRaisePhase(str, Enum):
    """Phases of a leg raise rep."""
    START = "start"
    UP = "up"
    DOWN = "down"


class HipFlexPhase(str, Enum):
    """Phases of a hip flexion rep."""
    START = "start"
    FLEXED = "flexed"
    EXTENDED = "extended"


# A phase enum member, or a raw phase string for exercises without one.
PhaseLike = Union[KneeBendPhase, LegRaisePhase, HipFlexPhase, str, None]


@dataclass(frozen=True)
class KneeBendThresholds:
    """
    Angle thresholds (degrees) for knee bends.

    Attributes:
        back_straight_min: Hip angle below which the back counts as bent.
        deep_flexion_max: Knee angle below which the rep reaches its target.
        extension_min: Knee angle above which the leg counts as extended.
        shallow_band: Open knee band that earns the "bend deeper" penalty.
    """
    back_straight_min: float = 150.0
    deep_flexion_max: float = 90.0
    extension_min: float = 160.0
    shallow_band: Tuple[float, float] = (120.0, 160.0)
    back_penalty: int = 20
    shallow_penalty: int = 10


@dataclass(frozen=True)
class LegRaiseThresholds:
    """
    Angle thresholds (degrees) for leg raises.

    Attributes:
        straight_leg_min: Knee angle below which the leg counts as bent.
        raised_max: Hip angle below which the leg counts as raised.
        lowered_min: Hip angle above which the leg counts as lowered.
        low_raise_band: Open hip band that earns the "raise higher" penalty.
    """
    straight_leg_min: float = 150.0
    raised_max: float = 120.0
    lowered_min: float = 160.0
    low_raise_band: Tuple[float, float] = (140.0, 160.0)
    bent_leg_penalty: int = 25
    low_raise_penalty: int = 10


@dataclass(frozen=True)
class HipFlexThresholds:
    """
    Hip angle bands (degrees) and the score each one earns.
    """
    full_flexion_max: float = 100.0
    partial_flexion_max: float = 120.0
    extension_min: float = 160.0
    full_flexion_score: int = 100
    partial_flexion_score: int = 80
    mid_range_score: int = 60


class ExerciseKind(Enum):
    """
    Exercises the classifier knows about.

    ``UNKNOWN`` is the explicit variant for unrecognized labels, so callers
    dispatch over a closed set instead of a string default branch.
    """
    KNEE_BEND = "knee-bend"
    LEG_RAISE = "leg-raise"
    HIP_FLEX = "hip-flex"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "ExerciseKind":
        """
        Resolve an exercise label, case-insensitively.

        Accepts both the spaced and the hyphenated spelling of each
        exercise ("knee bends" / "knee-bend"). Anything else is UNKNOWN.
        """
        if isinstance(label, ExerciseKind):
            return label
        if not label:
            return cls.UNKNOWN
        return _EXERCISE_LABELS.get(label.strip().lower(), cls.UNKNOWN)

    @property
    def phase_type(self) -> Optional[Type[Enum]]:
        return _PHASE_TYPES.get(self)

    @property
    def primary_joint(self) -> Optional[str]:
        """Joint whose angle drives the rep cycle."""
        return _PRIMARY_JOINTS.get(self)

    @property
    def required_joints(self) -> List[str]:
        return list(_REQUIRED_JOINTS.get(self, []))

    def start_phase(self) -> Optional[Enum]:
        phase_type = self.phase_type
        return phase_type("start") if phase_type else None

    def parse_phase(self, value) -> Optional[Enum]:
        """
        Coerce a phase given as enum member or string into this exercise's
        phase enum. Unknown values fall back to the start phase.
        """
        phase_type = self.phase_type
        if phase_type is None:
            return None
        if isinstance(value, phase_type):
            return value
        try:
            return phase_type(str(value.value if isinstance(value, Enum) else value))
        except ValueError:
            return phase_type("start")


_EXERCISE_LABELS = {
    "knee bends": ExerciseKind.KNEE_BEND,
    "knee-bend": ExerciseKind.KNEE_BEND,
    "leg raises": ExerciseKind.LEG_RAISE,
    "leg-raise": ExerciseKind.LEG_RAISE,
    "hip flexion": ExerciseKind.HIP_FLEX,
    "hip-flex": ExerciseKind.HIP_FLEX,
}

_PHASE_TYPES = {
    ExerciseKind.KNEE_BEND: KneeBendPhase,
    ExerciseKind.LEG_RAISE: LegRaisePhase,
    ExerciseKind.HIP_FLEX: HipFlexPhase,
}

_PRIMARY_JOINTS = {
    ExerciseKind.KNEE_BEND: "knee",
    ExerciseKind.LEG_RAISE: "hip",
    ExerciseKind.HIP_FLEX: "hip",
}

_REQUIRED_JOINTS = {
    ExerciseKind.KNEE_BEND: ("leftKnee", "rightKnee", "leftHip", "rightHip"),
    ExerciseKind.LEG_RAISE: ("leftKnee", "rightKnee", "leftHip", "rightHip"),
    ExerciseKind.HIP_FLEX: ("leftHip", "rightHip"),
}


@dataclass
class ExerciseState:
    """
    Classifier output for a single frame.

    Attributes:
        phase: Phase after this frame (a member of the exercise's phase
            enum, or the unchanged previous phase when nothing was scored).
        score: Form quality (0-100).
        feedback: Text shown to the patient.
        rep_completed: True if this frame closed a repetition.
    """
    phase: PhaseLike
    score: int = 0
    feedback: str = ""
    rep_completed: bool = False

    def to_dict(self) -> dict:
        phase = self.phase.value if isinstance(self.phase, Enum) else self.phase
        return {
            "phase": phase,
            "score": self.score,
            "feedback": self.feedback,
            "rep_completed": self.rep_completed,
        }


@dataclass(frozen=True)
class IdealRange:
    """Target band for one joint."""
    min: float
    max: float
    optimal: float


@dataclass
class FrameRecord:
    """
    One processed frame kept for session-level analysis.

    Attributes:
        angles: Joint angles of the frame.
        timestamp: Capture time in milliseconds.
    """
    angles: AngleSample = field(default_factory=dict)
    timestamp: float = 0.0


@dataclass(frozen=True)
class RangeOfMotion:
    """ROM statistics of one angle history, in whole degrees."""
    min: int = 0
    max: int = 0
    average: int = 0
    range: int = 0

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "average": self.average, "range": self.range}


@dataclass(frozen=True)
class SessionScore:
    """Per-session aggregate of rep scores."""
    total_reps: int = 0
    average_score: int = 0
    grade: str = "N/A"

    def to_dict(self) -> dict:
        return {
            "total_reps": self.total_reps,
            "average_score": self.average_score,
            "grade": self.grade,
        }
