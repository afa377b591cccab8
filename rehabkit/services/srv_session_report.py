import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends

from rehabkit.repository.repo_session_report import SessionReportRepository
from rehabkit.schemas.sche_session_report import SessionReportCreateRequest, SessionReportResponse
from rehabkit.scoring.core import ExerciseKind
from rehabkit.scoring.modules import JointRangeOfMotion, generate_rom_recommendations
from rehabkit.services.srv_exercise_session import ActiveSession

logger = logging.getLogger(__name__)


class SessionReportService:
    def __init__(self, report_repo: SessionReportRepository = Depends()):
        self.report_repo = report_repo

    def save_session(self, active: ActiveSession) -> SessionReportResponse:
        """Summarise a finished session and persist it as a report."""
        session = active.session
        summary = session.summary()
        session_score = session.session_score()
        rom = session.range_of_motion()

        # Anonymous sessions have no history to compare against.
        previous_rom = None
        if active.patient_id is not None:
            previous = self.report_repo.get_latest(session.exercise.value, active.patient_id)
            if previous is not None and previous.joint_rom:
                previous_rom = JointRangeOfMotion(**previous.joint_rom)

        recommendations = generate_rom_recommendations(summary.range_of_motion, previous_rom)

        report_data = SessionReportCreateRequest(
            session_id=session.session_id,
            patient_id=active.patient_id,
            exercise_type=session.exercise.value,
            total_reps=session_score.total_reps,
            average_score=session_score.average_score,
            grade=session_score.grade,
            rom_min=rom.min,
            rom_max=rom.max,
            rom_average=rom.average,
            rom_range=rom.range,
            duration_seconds=summary.duration,
            rep_scores=list(session.rep_scores),
            form_quality=summary.form_quality.to_dict(),
            joint_rom=summary.range_of_motion.to_dict() if summary.range_of_motion else None,
            recommendations=[r.to_dict() for r in recommendations],
        )
        report = self.report_repo.create(report_data)
        logger.info(f"save_session: report_id={report.report_id}, session_id={session.session_id}")
        return SessionReportResponse.model_validate(report)

    def get_reports(
        self,
        exercise_type: Optional[str] = None,
        patient_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[SessionReportResponse]:
        if exercise_type:
            kind = ExerciseKind.from_label(exercise_type)
            if kind is not ExerciseKind.UNKNOWN:
                exercise_type = kind.value
        reports = self.report_repo.get_all(
            exercise_type=exercise_type, patient_id=patient_id,
            start_date=start_date, end_date=end_date, limit=limit,
        )
        return [SessionReportResponse.model_validate(r) for r in reports]

    def get_report_by_id(self, report_id: str) -> Optional[SessionReportResponse]:
        report = self.report_repo.get_by_id(report_id)
        if report:
            return SessionReportResponse.model_validate(report)
        return None

    def delete_report(self, report_id: str) -> bool:
        return self.report_repo.delete(report_id)
