from datetime import datetime
from typing import Optional, List
from fastapi import Depends
from rehabkit.db.base import get_db
from rehabkit.models.model_session_report import SessionReport
from rehabkit.schemas.sche_session_report import SessionReportCreateRequest


class SessionReportRepository:
    def __init__(self, db_session = Depends(get_db)):
        self.db = db_session

    def create(self, report_data: SessionReportCreateRequest) -> SessionReport:
        report = SessionReport(**report_data.model_dump())
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report

    def get_by_id(self, report_id: str) -> Optional[SessionReport]:
        return self.db.query(SessionReport).filter(SessionReport.report_id == report_id).first()

    def get_all(
        self,
        exercise_type: Optional[str] = None,
        patient_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[SessionReport]:
        query = self.db.query(SessionReport)
        if exercise_type:
            query = query.filter(SessionReport.exercise_type == exercise_type)
        if patient_id:
            query = query.filter(SessionReport.patient_id == patient_id)
        if start_date:
            query = query.filter(SessionReport.created_at >= start_date)
        if end_date:
            query = query.filter(SessionReport.created_at <= end_date)
        # created_at has one-second resolution on SQLite; id breaks ties in insert order
        return query.order_by(SessionReport.created_at.desc(), SessionReport.id.desc()).limit(limit).all()

    def get_latest(self, exercise_type: str, patient_id: str) -> Optional[SessionReport]:
        reports = self.get_all(exercise_type=exercise_type, patient_id=patient_id, limit=1)
        return reports[0] if reports else None

    def delete(self, report_id: str) -> bool:
        report = self.get_by_id(report_id)
        if not report:
            return False
        self.db.delete(report)
        self.db.commit()
        return True
