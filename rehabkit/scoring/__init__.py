# Scoring Package
# Rep counting, form scoring and session aggregation for RehabKit

from .core import ExerciseKind, ExerciseState, calculate_form_quality
from .modules import (
    ExerciseSession, track_range_of_motion, calculate_session_score,
    calculate_form_quality_score, generate_session_summary,
)
from .utils import SessionLogger

__all__ = [
    'ExerciseKind',
    'ExerciseState',
    'calculate_form_quality',
    'ExerciseSession',
    'track_range_of_motion',
    'calculate_session_score',
    'calculate_form_quality_score',
    'generate_session_summary',
    'SessionLogger'
]
