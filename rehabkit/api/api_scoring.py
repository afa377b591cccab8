from typing import Any
from fastapi import APIRouter, Depends
import logging

from rehabkit.schemas.sche_base import DataResponse
from rehabkit.schemas.sche_scoring import (
    FormQualityRequest, RangeOfMotionRequest, SessionScoreRequest, FeedbackReportRequest,
    ExerciseStateResponse, RangeOfMotionResponse, SessionScoreResponse, FeedbackReportResponse,
)
from rehabkit.services.srv_scoring import ScoringService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post('/form-quality', response_model=DataResponse[ExerciseStateResponse])
def score_form_quality(
    request: FormQualityRequest,
    scoring_service: ScoringService = Depends()
) -> Any:
    """
    Classify one frame and score its form.

    Stateless: the caller passes the phase returned for its previous frame
    and keeps the returned phase for the next one.

    **Response**: Phase, score (0-100), feedback and rep-completion flag.
    """
    state = scoring_service.form_quality(request)
    return DataResponse().success_response(data=state)


@router.post('/range-of-motion', response_model=DataResponse[RangeOfMotionResponse])
def score_range_of_motion(
    request: RangeOfMotionRequest,
    scoring_service: ScoringService = Depends()
) -> Any:
    """
    Min / max / average / range of an angle history, in whole degrees.
    """
    logger.info(f"score_range_of_motion request: {len(request.angle_history)} samples")
    return DataResponse().success_response(data=scoring_service.range_of_motion(request))


@router.post('/session-score', response_model=DataResponse[SessionScoreResponse])
def score_session(
    request: SessionScoreRequest,
    scoring_service: ScoringService = Depends()
) -> Any:
    """
    Rep count, average score and letter grade of a list of rep scores.
    """
    logger.info(f"score_session request: {len(request.rep_scores)} reps")
    return DataResponse().success_response(data=scoring_service.session_score(request))


@router.post('/feedback', response_model=DataResponse[FeedbackReportResponse])
def score_feedback(
    request: FeedbackReportRequest,
    scoring_service: ScoringService = Depends()
) -> Any:
    """
    Real-time corrections for one frame.

    **Process**:
    1. Check each joint against the exercise's ideal band (±10°)
    2. Rate the pace of the driving angle over the last second
    3. Flag joints that jumped more than 15° since the previous frame

    **Response**: Corrections, pace, jerky joints and an overall quality (0-100).
    """
    return DataResponse().success_response(data=scoring_service.feedback_report(request))
