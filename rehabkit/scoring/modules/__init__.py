"""
Modules Package for RehabKit scoring.

Session aggregators, form analysis and the session context.
"""

from .range_of_motion import (
    track_range_of_motion, track_joint_rom, calculate_rom_consistency,
    generate_rom_recommendations, calculate_rep_completion,
    JointRangeOfMotion, RomRecommendation, RepCompletion,
)
from .session_score import calculate_session_score, get_grade_from_score
from .form_analysis import (
    calculate_form_quality_score, generate_session_summary,
    FormQualityReport, SessionSummary,
)
from .real_time_feedback import (
    generate_real_time_feedback, analyze_joint_angle, analyze_movement_speed,
    detect_form_deviations, calculate_overall_quality, generate_feedback_report,
    FeedbackSeverity, FeedbackReport, RealTimeFeedback, SpeedAnalysis, FormDeviation,
)
from .session import ExerciseSession

__all__ = [
    # Range of motion
    'track_range_of_motion', 'track_joint_rom', 'calculate_rom_consistency',
    'generate_rom_recommendations', 'calculate_rep_completion',
    'JointRangeOfMotion', 'RomRecommendation', 'RepCompletion',

    # Session score
    'calculate_session_score', 'get_grade_from_score',

    # Form analysis
    'calculate_form_quality_score', 'generate_session_summary',
    'FormQualityReport', 'SessionSummary',

    # Real-time feedback
    'generate_real_time_feedback', 'analyze_joint_angle', 'analyze_movement_speed',
    'detect_form_deviations', 'calculate_overall_quality', 'generate_feedback_report',
    'FeedbackSeverity', 'FeedbackReport', 'RealTimeFeedback', 'SpeedAnalysis', 'FormDeviation',

    # Session
    'ExerciseSession',
]
