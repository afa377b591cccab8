from datetime import datetime
from typing import Any, List, Optional
from fastapi import APIRouter, Depends
import logging

from rehabkit.core.config import settings
from rehabkit.helpers.exception_handler import CustomException
from rehabkit.schemas.sche_base import DataResponse
from rehabkit.schemas.sche_session_report import SessionReportResponse
from rehabkit.services.srv_session_report import SessionReportService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get('', response_model=DataResponse[List[SessionReportResponse]])
def get_session_reports(
    exercise_type: Optional[str] = None,
    patient_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = settings.REPORT_LIST_LIMIT,
    report_service: SessionReportService = Depends()
) -> Any:
    """
    List saved session reports, newest first.

    Optional filters: exercise type, patient, creation date range.
    """
    logger.info(f"get_session_reports request: exercise_type={exercise_type}, patient_id={patient_id}")
    reports = report_service.get_reports(
        exercise_type=exercise_type, patient_id=patient_id,
        start_date=start_date, end_date=end_date, limit=limit,
    )
    logger.info(f"get_session_reports success: {len(reports)} reports retrieved")
    return DataResponse().success_response(data=reports)


@router.get('/{report_id}', response_model=DataResponse[SessionReportResponse])
def get_session_report(
    report_id: str,
    report_service: SessionReportService = Depends()
) -> Any:
    report = report_service.get_report_by_id(report_id)
    if report is None:
        raise CustomException(http_code=404, code='404', message="Session report not found")
    return DataResponse().success_response(data=report)


@router.delete('/{report_id}', response_model=DataResponse[bool])
def delete_session_report(
    report_id: str,
    report_service: SessionReportService = Depends()
) -> Any:
    logger.info(f"delete_session_report request: report_id={report_id}")
    if not report_service.delete_report(report_id):
        logger.warning(f"delete_session_report not found: report_id={report_id}")
        raise CustomException(http_code=404, code='404', message="Session report not found")
    return DataResponse().success_response(data=True)
