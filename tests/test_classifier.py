"""Tests for the exercise phase classifier and form quality scorer.

Covers:
  - Exercise label resolution
  - Knee bend / leg raise / hip flexion state machines
  - Penalty stacking
  - Degenerate input (no pose, missing joints, unknown exercise)
"""

import pytest

from rehabkit.scoring.core import (
    ExerciseKind, KneeBendPhase, LegRaisePhase, HipFlexPhase,
    calculate_form_quality, FEEDBACK_NO_POSE, FEEDBACK_NOT_RECOGNIZED,
)
from tests.conftest import make_angles


# ============================================================================
# Exercise labels
# ============================================================================

class TestExerciseKind:

    @pytest.mark.parametrize("label,expected", [
        ("knee bends", ExerciseKind.KNEE_BEND),
        ("Knee-Bend", ExerciseKind.KNEE_BEND),
        ("LEG RAISES", ExerciseKind.LEG_RAISE),
        ("leg-raise", ExerciseKind.LEG_RAISE),
        ("hip flexion", ExerciseKind.HIP_FLEX),
        ("Hip-Flex", ExerciseKind.HIP_FLEX),
        ("squats", ExerciseKind.UNKNOWN),
        ("", ExerciseKind.UNKNOWN),
        (None, ExerciseKind.UNKNOWN),
    ])
    def test_from_label(self, label, expected):
        assert ExerciseKind.from_label(label) is expected

    def test_parse_phase_accepts_strings_and_members(self):
        kind = ExerciseKind.KNEE_BEND
        assert kind.parse_phase("flexion") is KneeBendPhase.FLEXION
        assert kind.parse_phase(KneeBendPhase.EXTENSION) is KneeBendPhase.EXTENSION
        assert kind.parse_phase(None) is KneeBendPhase.START

    def test_parse_phase_rejects_other_exercise_phase(self):
        # "up" belongs to leg raises, not knee bends
        assert ExerciseKind.KNEE_BEND.parse_phase("up") is KneeBendPhase.START


# ============================================================================
# Knee bends
# ============================================================================

class TestKneeBend:

    def test_full_rep(self):
        state = calculate_form_quality(make_angles(knee=85), "knee bends", "start")
        assert state.phase is KneeBendPhase.FLEXION
        assert state.rep_completed is False
        assert state.score == 100

        state = calculate_form_quality(make_angles(knee=170), "knee bends", state.phase)
        assert state.phase is KneeBendPhase.EXTENSION
        assert state.rep_completed is True
        assert state.score == 100
        assert state.feedback == "Great rep! Keep going"

    def test_extension_to_extension_is_not_a_rep(self):
        state = calculate_form_quality(make_angles(knee=170), "knee-bend", "extension")
        assert state.phase is KneeBendPhase.EXTENSION
        assert state.rep_completed is False

    def test_flexion_held_is_not_a_rep(self):
        state = calculate_form_quality(make_angles(knee=80), "knee-bend", "flexion")
        assert state.phase is KneeBendPhase.FLEXION
        assert state.rep_completed is False

    def test_bent_back_penalty(self):
        state = calculate_form_quality(make_angles(knee=85, hip=140), "knee-bend")
        assert state.score == 80
        assert state.feedback == "Keep your back straight"

    def test_shallow_bend_penalty(self):
        state = calculate_form_quality(make_angles(knee=130), "knee-bend", "extension")
        assert state.score == 90
        assert state.feedback == "Try bending deeper"
        assert state.phase is KneeBendPhase.EXTENSION

    def test_penalties_stack_and_last_feedback_wins(self):
        state = calculate_form_quality(make_angles(knee=130, hip=140), "knee-bend")
        assert state.score == 70
        assert state.feedback == "Try bending deeper"

    def test_uses_the_more_bent_side(self):
        angles = {"leftKnee": 170, "rightKnee": 85, "leftHip": 170, "rightHip": 170}
        state = calculate_form_quality(angles, "knee-bend", "start")
        assert state.phase is KneeBendPhase.FLEXION

    def test_band_edges_are_exclusive(self):
        assert calculate_form_quality(make_angles(knee=160), "knee-bend").score == 100
        assert calculate_form_quality(make_angles(knee=120), "knee-bend").score == 100
        state = calculate_form_quality(make_angles(knee=90), "knee-bend", "start")
        assert state.phase is KneeBendPhase.START


# ============================================================================
# Leg raises
# ============================================================================

class TestLegRaise:

    def test_full_rep(self):
        state = calculate_form_quality(make_angles(knee=170, hip=100), "leg raises", "down")
        assert state.phase is LegRaisePhase.UP
        assert state.score == 100

        state = calculate_form_quality(make_angles(knee=170, hip=170), "leg raises", state.phase)
        assert state.phase is LegRaisePhase.DOWN
        assert state.rep_completed is True
        assert state.feedback == "Excellent! One more"

    def test_start_to_up(self):
        state = calculate_form_quality(make_angles(knee=170, hip=100), "leg raises", "start")
        assert state.phase is LegRaisePhase.UP
        assert state.rep_completed is False

        state = calculate_form_quality(make_angles(knee=170, hip=100), "leg raises")
        assert state.phase is LegRaisePhase.UP

    def test_bent_knee_penalty_survives_rep(self):
        state = calculate_form_quality(make_angles(knee=140, hip=170), "leg-raise", "up")
        assert state.rep_completed is True
        assert state.score == 75

    def test_low_raise_penalty(self):
        state = calculate_form_quality(make_angles(knee=170, hip=150), "leg-raise", "down")
        assert state.score == 90
        assert state.feedback == "Raise your leg higher"
        assert state.phase is LegRaisePhase.DOWN

    def test_both_penalties(self):
        state = calculate_form_quality(make_angles(knee=100, hip=150), "leg-raise")
        assert state.score == 65


# ============================================================================
# Hip flexion
# ============================================================================

class TestHipFlex:

    def test_full_rep(self):
        state = calculate_form_quality(make_angles(hip=95), "hip flexion", "start")
        assert state.score == 100
        assert state.phase is HipFlexPhase.FLEXED
        assert state.rep_completed is False

        state = calculate_form_quality(make_angles(hip=170), "hip flexion", state.phase)
        assert state.rep_completed is True
        assert state.phase is HipFlexPhase.EXTENDED
        assert state.score == 100

    def test_entering_flexion_from_extended_is_not_a_rep(self):
        state = calculate_form_quality(make_angles(hip=95), "hip flexion", "extended")
        assert state.phase is HipFlexPhase.FLEXED
        assert state.rep_completed is False
        assert state.score == 100
        assert state.feedback == "Perfect! Hold this position"

    def test_partial_flexion(self):
        state = calculate_form_quality(make_angles(hip=110), "hip-flex", "extended")
        assert state.score == 80
        assert state.phase is HipFlexPhase.FLEXED
        assert state.rep_completed is False

    def test_mid_range_keeps_phase(self):
        state = calculate_form_quality(make_angles(hip=130), "hip-flex", "flexed")
        assert state.score == 60
        assert state.phase is HipFlexPhase.FLEXED
        assert state.feedback == "Flex your hip more"

    def test_only_hips_required(self):
        state = calculate_form_quality({"leftHip": 95, "rightHip": 97}, "hip-flex")
        assert state.score == 100


# ============================================================================
# Degenerate input
# ============================================================================

class TestDegenerateInput:

    def test_no_pose(self):
        state = calculate_form_quality(None, "knee bends")
        assert state.score == 0
        assert state.feedback == FEEDBACK_NO_POSE
        assert state.rep_completed is False

    def test_no_pose_keeps_phase(self):
        state = calculate_form_quality(None, "knee bends", "flexion")
        assert state.phase is KneeBendPhase.FLEXION

    def test_missing_joint_keeps_phase(self):
        angles = {"leftKnee": 170, "rightKnee": 170, "leftHip": 170}
        state = calculate_form_quality(angles, "knee bends", "flexion")
        assert state.score == 0
        assert state.feedback == FEEDBACK_NO_POSE
        assert state.phase is KneeBendPhase.FLEXION

    def test_unknown_exercise(self):
        state = calculate_form_quality(make_angles(), "jumping jacks", "flexion")
        assert state.score == 0
        assert state.feedback == FEEDBACK_NOT_RECOGNIZED
        assert state.rep_completed is False
        assert state.phase == "flexion"

    @pytest.mark.parametrize("exercise", ["knee bends", "leg raises", "hip flexion"])
    @pytest.mark.parametrize("knee,hip", [(0, 0), (45, 200), (130, 140), (250, 95), (-10, 150)])
    def test_score_stays_in_range(self, exercise, knee, hip):
        state = calculate_form_quality(make_angles(knee=knee, hip=hip), exercise)
        assert 0 <= state.score <= 100
