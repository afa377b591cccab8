"""
Exercise Session Module for RehabKit.

Caller-owned session context around the pure classifier. It holds the
state the classifier must not: the current phase, the angle histories,
the per-rep scores and the recorded frames.

Every frame follows the same discipline:
    1. read the current phase
    2. call ``calculate_form_quality``
    3. write back the new phase, append histories, append the rep score
    4. build the real-time feedback report from the recent history

Example:
    >>> session = ExerciseSession(ExerciseKind.KNEE_BEND)
    >>> state = session.process_frame({"leftKnee": 85, "rightKnee": 85,
    ...                                "leftHip": 170, "rightHip": 170})
    >>> session.rep_count
    0

Author: RehabKit Team
Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import time
import uuid

from ..core.classifier import calculate_form_quality, has_required_joints
from ..core.data_types import (
    AngleSample, ExerciseKind, ExerciseState, FrameRecord, PhaseLike, RangeOfMotion, SessionScore,
)
from ..utils.logger import SessionLogger
from .form_analysis import SessionSummary, generate_session_summary
from .real_time_feedback import FeedbackReport, SPEED_WINDOW_MS, generate_feedback_report
from .range_of_motion import track_range_of_motion
from .session_score import calculate_session_score


@dataclass
class ExerciseSession:
    """
    State of one patient working through one exercise.

    Attributes:
        exercise: Exercise being performed.
        session_id: Identifier used in logs and reports.
        phase: Phase returned for the last frame.
        angle_history: Readings per joint id, in capture order.
        primary_angle_history: Readings of the angle that drives the rep cycle.
        rep_scores: Frame score at each completed rep.
        frames: Scored frames, kept for the session summary.
        last_state: Classifier output of the last frame.
        last_feedback: Real-time corrections for the last frame.
        previous_angles: Angles of the last frame that had a pose.
        logger: Optional structured event log.
    """
    exercise: ExerciseKind
    session_id: str = field(default_factory=lambda: f"session_{uuid.uuid4().hex[:12]}")
    phase: PhaseLike = None
    angle_history: Dict[str, List[float]] = field(default_factory=dict)
    primary_angle_history: List[float] = field(default_factory=list)
    rep_scores: List[int] = field(default_factory=list)
    frames: List[FrameRecord] = field(default_factory=list)
    last_state: Optional[ExerciseState] = None
    last_feedback: Optional[FeedbackReport] = None
    previous_angles: Optional[AngleSample] = None
    frame_count: int = 0
    started_at: float = field(default_factory=time.time)
    logger: Optional[SessionLogger] = None

    def __post_init__(self):
        self.exercise = ExerciseKind.from_label(self.exercise)
        if self.phase is None:
            self.phase = self.exercise.start_phase() or "start"

    @property
    def rep_count(self) -> int:
        return len(self.rep_scores)

    def process_frame(self, angles: Optional[AngleSample], timestamp: Optional[float] = None) -> ExerciseState:
        """
        Classify one frame and fold it into the session.

        Args:
            angles: Joint angles of the frame, or None if no pose was found.
            timestamp: Capture time in ms (defaults to now).

        Returns:
            ExerciseState: Classifier output for this frame.
        """
        self.frame_count += 1
        previous_phase = self.phase
        if timestamp is None:
            timestamp = time.time() * 1000

        state = calculate_form_quality(angles, self.exercise, previous_phase)

        self.phase = state.phase
        self.last_state = state

        if angles and has_required_joints(angles, self.exercise):
            self._record_angles(angles, timestamp)

        self.last_feedback = generate_feedback_report(
            angles, self.exercise,
            angle_history=self._recent_primary_angles(timestamp),
            previous_angles=self.previous_angles,
        )
        if angles:
            self.previous_angles = dict(angles)

        if state.rep_completed:
            self.rep_scores.append(state.score)

        if self.logger is not None:
            self.logger.log_scoring_frame(self.frame_count, angles, state.to_dict())
            if state.phase != previous_phase:
                self.logger.log_phase_change(self.frame_count, _phase_value(previous_phase), _phase_value(state.phase))
            if state.rep_completed:
                self.logger.log_rep(self.rep_count, state.score)

        return state

    def _record_angles(self, angles: AngleSample, timestamp: float) -> None:
        for joint, angle in angles.items():
            if angle is None:
                continue
            self.angle_history.setdefault(joint, []).append(float(angle))

        primary = self.primary_angle(angles)
        if primary is not None:
            self.primary_angle_history.append(primary)

        self.frames.append(FrameRecord(angles=dict(angles), timestamp=float(timestamp)))

    def _recent_primary_angles(self, now: float) -> List[float]:
        """Driving-angle readings of the frames captured in the last second."""
        recent = []
        for frame in self.frames:
            if now - frame.timestamp > SPEED_WINDOW_MS:
                continue
            angle = self.primary_angle(frame.angles)
            if angle is not None:
                recent.append(angle)
        return recent

    def primary_angle(self, angles: AngleSample) -> Optional[float]:
        """The classifier's driving angle: the smaller of the two sides."""
        joint = self.exercise.primary_joint
        if joint is None:
            return None
        side = joint.capitalize()
        readings = [angles.get(f"left{side}"), angles.get(f"right{side}")]
        readings = [float(r) for r in readings if r is not None]
        return min(readings) if readings else None

    def range_of_motion(self, joint: Optional[str] = None) -> RangeOfMotion:
        """ROM of the driving angle, or of one joint id when given."""
        if joint is None:
            return track_range_of_motion(self.primary_angle_history)
        return track_range_of_motion(self.angle_history.get(joint))

    def session_score(self) -> SessionScore:
        return calculate_session_score(self.rep_scores)

    def summary(self) -> SessionSummary:
        return generate_session_summary(self.frames, self.exercise, self.rep_count)

    def status(self) -> dict:
        """Snapshot for real-time display."""
        return {
            "session_id": self.session_id,
            "exercise_type": self.exercise.value,
            "phase": _phase_value(self.phase),
            "rep_count": self.rep_count,
            "frame_count": self.frame_count,
            "last_score": self.last_state.score if self.last_state else 0,
            "last_feedback": self.last_state.feedback if self.last_state else "",
        }

    def reset(self) -> None:
        """Start over with the same exercise."""
        self.phase = self.exercise.start_phase() or "start"
        self.angle_history = {}
        self.primary_angle_history = []
        self.rep_scores = []
        self.frames = []
        self.last_state = None
        self.last_feedback = None
        self.previous_angles = None
        self.frame_count = 0
        self.started_at = time.time()


def _phase_value(phase) -> Optional[str]:
    return getattr(phase, "value", phase)
