from typing import Any
from fastapi import APIRouter, Depends
import logging

from rehabkit.helpers.exception_handler import CustomException
from rehabkit.schemas.sche_base import DataResponse
from rehabkit.schemas.sche_scoring import (
    StartSessionRequest, StartSessionResponse, ProcessFrameRequest, ProcessFrameResponse,
    SessionStatusResponse,
)
from rehabkit.schemas.sche_session_report import SessionReportResponse
from rehabkit.services.srv_exercise_session import exercise_session_service
from rehabkit.services.srv_session_report import SessionReportService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post('', response_model=DataResponse[StartSessionResponse])
def start_session(request: StartSessionRequest) -> Any:
    """
    Start a live exercise session.

    **Process**:
    1. Resolve the exercise label ("knee bends", "leg-raise", "hip flexion", ...)
    2. Create an in-memory session starting in the exercise's start phase

    **Response**: Session id to use for the frame and end calls.
    """
    logger.info(f"start_session request: exercise={request.exercise_type}")
    return DataResponse().success_response(data=exercise_session_service.start_session(request))


@router.post('/{session_id}/frames', response_model=DataResponse[ProcessFrameResponse])
def process_frame(session_id: str, request: ProcessFrameRequest) -> Any:
    """
    Feed one frame of joint angles into a session.

    **Response**: Classifier output for the frame and the session's rep count.
    """
    return DataResponse().success_response(data=exercise_session_service.process_frame(session_id, request))


@router.get('/{session_id}', response_model=DataResponse[SessionStatusResponse])
def get_session_status(session_id: str) -> Any:
    """
    Current phase, rep count and last score of a live session.
    """
    return DataResponse().success_response(data=exercise_session_service.get_status(session_id))


@router.post('/{session_id}/end', response_model=DataResponse[SessionReportResponse])
def end_session(
    session_id: str,
    report_service: SessionReportService = Depends()
) -> Any:
    """
    End a session and persist its report.

    **Process**:
    1. Aggregate ROM, rep scores and form quality
    2. Compare against the patient's previous report for this exercise
    3. Save the report
    4. Detach the session from memory

    The session stays live if the report cannot be saved, so the call can
    be retried.

    **Response**: The saved session report.
    """
    active = exercise_session_service.get_session(session_id)
    try:
        report = report_service.save_session(active)
    except Exception as e:
        logger.error(f"end_session error: {str(e)}", exc_info=True)
        raise CustomException(http_code=500, code='500', message=f"Failed to save session report: {str(e)}")

    exercise_session_service.end_session(session_id)
    logger.info(f"end_session success: session_id={session_id}, report_id={report.report_id}")
    return DataResponse().success_response(data=report)
