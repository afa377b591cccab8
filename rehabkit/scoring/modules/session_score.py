"""
Session Score Module for RehabKit.

Reduces the per-rep scores of a session into a rep count, an average
and a letter grade.
"""

from typing import Optional, Sequence

from ..core.data_types import SessionScore
from ..utils.numeric import round_half_up


# Lower bound of each grade, best first.
GRADE_THRESHOLDS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)

NO_GRADE = "N/A"


def get_grade_from_score(score: float) -> str:
    """
    Convert a 0-100 score to a letter grade.

    Returns:
        str: "A" (>=90), "B" (>=80), "C" (>=70), "D" (>=60) or "F".
    """
    for lower_bound, grade in GRADE_THRESHOLDS:
        if score >= lower_bound:
            return grade
    return "F"


def calculate_session_score(rep_scores: Optional[Sequence[int]]) -> SessionScore:
    """
    Aggregate per-rep scores.

    Args:
        rep_scores: Scores (0-100) of the completed reps, in order.

    Returns:
        SessionScore: ``{0, 0, "N/A"}`` when no rep was completed.
    """
    if not rep_scores:
        return SessionScore(total_reps=0, average_score=0, grade=NO_GRADE)

    total_reps = len(rep_scores)
    average_score = round_half_up(sum(rep_scores) / total_reps)

    return SessionScore(
        total_reps=total_reps,
        average_score=average_score,
        grade=get_grade_from_score(average_score),
    )
