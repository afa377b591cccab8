"""
Stateless scoring service.

Thin layer between the API and the scoring core: converts request schemas
into core calls and core results into response schemas.
"""

import logging

from rehabkit.schemas.sche_scoring import (
    FormQualityRequest, RangeOfMotionRequest, SessionScoreRequest, FeedbackReportRequest,
    ExerciseStateResponse, RangeOfMotionResponse, SessionScoreResponse, FeedbackReportResponse,
)
from rehabkit.scoring.core import calculate_form_quality
from rehabkit.scoring.modules import track_range_of_motion, calculate_session_score, generate_feedback_report


class ScoringService:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def form_quality(self, request: FormQualityRequest) -> ExerciseStateResponse:
        state = calculate_form_quality(request.angles, request.exercise_type, request.previous_phase)
        self.logger.debug(f"form_quality: exercise={request.exercise_type}, score={state.score}")
        return ExerciseStateResponse(**state.to_dict())

    def range_of_motion(self, request: RangeOfMotionRequest) -> RangeOfMotionResponse:
        return RangeOfMotionResponse(**track_range_of_motion(request.angle_history).to_dict())

    def session_score(self, request: SessionScoreRequest) -> SessionScoreResponse:
        return SessionScoreResponse(**calculate_session_score(request.rep_scores).to_dict())

    def feedback_report(self, request: FeedbackReportRequest) -> FeedbackReportResponse:
        report = generate_feedback_report(
            request.angles, request.exercise_type,
            angle_history=request.angle_history,
            previous_angles=request.previous_angles,
        )
        return FeedbackReportResponse(**report.to_dict())
