"""Tests for the caller-owned exercise session context."""

import pytest

from rehabkit.scoring.core import ExerciseKind, KneeBendPhase, HipFlexPhase, FEEDBACK_NO_POSE
from rehabkit.scoring.modules import ExerciseSession
from rehabkit.scoring.utils import SessionLogger, LogCategory, LogLevel
from tests.conftest import make_angles


def _run(session, frames, step_ms=33):
    return [session.process_frame(angles, timestamp=i * step_ms) for i, angles in enumerate(frames)]


class TestKneeBendSession:

    KNEES = [170, 130, 85, 130, 170]

    def test_full_cycle(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        states = _run(session, [make_angles(knee=k) for k in self.KNEES])

        assert [s.score for s in states] == [100, 90, 100, 90, 100]
        assert [s.rep_completed for s in states] == [False, False, False, False, True]
        assert states[-1].feedback == "Great rep! Keep going"
        assert session.rep_count == 1
        assert session.rep_scores == [100]
        assert session.phase is KneeBendPhase.EXTENSION

    def test_primary_range_of_motion(self):
        session = ExerciseSession("knee bends")
        _run(session, [make_angles(knee=k) for k in self.KNEES])

        rom = session.range_of_motion()
        assert (rom.min, rom.max, rom.average, rom.range) == (85, 170, 137, 85)

    def test_per_joint_range_of_motion(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        _run(session, [make_angles(knee=k, hip=h) for k, h in ((170, 170), (90, 150))])

        rom = session.range_of_motion("leftHip")
        assert (rom.min, rom.max, rom.range) == (150, 170, 20)
        assert session.range_of_motion("leftElbow").range == 0

    def test_session_score(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        _run(session, [make_angles(knee=k) for k in self.KNEES * 2])

        score = session.session_score()
        assert score.total_reps == 2
        assert score.average_score == 100
        assert score.grade == "A"

    def test_primary_angle_uses_smaller_side(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        assert session.primary_angle({"leftKnee": 100, "rightKnee": 140}) == 100
        assert session.primary_angle({"leftHip": 100}) is None


class TestOtherExercises:

    def test_leg_raise_rep(self):
        session = ExerciseSession(ExerciseKind.LEG_RAISE)
        states = _run(session, [make_angles(hip=h) for h in (170, 110, 170)])

        assert [s.phase for s in states] == ["down", "up", "down"]
        assert states[-1].rep_completed is True
        assert session.rep_scores == [100]

    def test_hip_flex_rep(self):
        session = ExerciseSession(ExerciseKind.HIP_FLEX)
        states = _run(session, [make_angles(hip=h) for h in (170, 95, 110, 170)])

        assert [s.score for s in states] == [100, 100, 80, 100]
        assert states[-1].feedback == "Great rep!"
        assert session.phase is HipFlexPhase.EXTENDED
        assert session.rep_count == 1


class TestDegenerateFrames:

    def test_no_pose_keeps_phase(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.process_frame(make_angles(knee=85))

        state = session.process_frame(None)

        assert state.score == 0
        assert state.feedback == FEEDBACK_NO_POSE
        assert session.phase is KneeBendPhase.FLEXION
        assert session.frame_count == 2
        assert len(session.frames) == 1
        assert session.primary_angle_history == [85.0]

    def test_missing_joint_not_recorded(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.process_frame({"leftKnee": 90, "rightKnee": 90})

        assert session.angle_history == {}
        assert session.last_state.score == 0

    def test_noise_around_threshold_counts_nothing(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        _run(session, [make_angles(knee=k) for k in (165, 158, 165, 158, 165)])
        assert session.rep_count == 0


class TestSessionLifecycle:

    def test_new_session_starts_in_start_phase(self):
        session = ExerciseSession(ExerciseKind.LEG_RAISE)
        assert session.phase == "start"
        assert session.session_id.startswith("session_")

    def test_status(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND, session_id="abc")
        session.process_frame(make_angles(knee=85))

        status = session.status()
        assert status == {
            "session_id": "abc",
            "exercise_type": "knee-bend",
            "phase": "flexion",
            "rep_count": 0,
            "frame_count": 1,
            "last_score": 100,
            "last_feedback": "Good form!",
        }

    def test_reset(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        _run(session, [make_angles(knee=k) for k in TestKneeBendSession.KNEES])

        session.reset()

        assert session.rep_count == 0
        assert session.frame_count == 0
        assert session.frames == []
        assert session.phase is KneeBendPhase.START
        assert session.last_state is None

    def test_summary(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        _run(session, [make_angles(knee=k) for k in TestKneeBendSession.KNEES], step_ms=1000)

        summary = session.summary()
        assert summary.rep_count == 1
        assert summary.duration == 4
        assert summary.range_of_motion.primary_joint == "knee"
        assert summary.range_of_motion.range_of_motion == 85

    def test_logger_records_events(self, tmp_path):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.logger = SessionLogger(session.session_id, str(tmp_path))
        _run(session, [make_angles(knee=k) for k in TestKneeBendSession.KNEES])
        session.process_frame(None)

        categories = [e.category for e in session.logger.entries]
        assert categories.count(LogCategory.PHASE) == 3
        assert any(e.message == "Rep 1 completed" for e in session.logger.entries)
        assert session.logger.entries[-1].level is LogLevel.WARNING


@pytest.mark.parametrize("label", ["knee bends", "Leg Raises", "hip flexion"])
def test_session_accepts_labels(label):
    session = ExerciseSession(label)
    assert session.exercise is not ExerciseKind.UNKNOWN


class TestRealTimeFeedback:

    def test_first_frame_has_no_pace(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.process_frame(make_angles(knee=90), timestamp=0)

        report = session.last_feedback
        assert report.real_time.message == "Excellent form!"
        assert report.speed.feedback == "Insufficient data"
        assert report.deviations == []
        assert report.overall_quality == 90

    def test_pace_and_jerk_from_recent_frames(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.process_frame(make_angles(knee=90), timestamp=0)
        session.process_frame(make_angles(knee=120), timestamp=500)

        report = session.last_feedback
        assert report.speed.speed == 30
        assert report.speed.is_optimal is True
        assert report.real_time.severity.value == "warning"
        assert {d.joint for d in report.deviations} == {"leftKnee", "rightKnee"}
        assert report.overall_quality == 75

    def test_pace_window_is_one_second(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.process_frame(make_angles(knee=90), timestamp=0)
        session.process_frame(make_angles(knee=95), timestamp=2000)

        assert session.last_feedback.speed.feedback == "Insufficient data"

    def test_no_pose_frame(self):
        session = ExerciseSession(ExerciseKind.KNEE_BEND)
        session.process_frame(make_angles(knee=90), timestamp=0)
        session.process_frame(None, timestamp=33)

        assert session.last_feedback.real_time.message == "Unable to detect pose"
        assert session.previous_angles == make_angles(knee=90)
