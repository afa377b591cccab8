from sqlalchemy import Column, String, Integer, DateTime, JSON, func
from rehabkit.models.model_base import Base
import uuid


class SessionReport(Base):
    __tablename__ = "session_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    report_id = Column(String(36), unique=True, nullable=False, index=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String(64), nullable=False, index=True)
    patient_id = Column(String(64), index=True)
    exercise_type = Column(String(32), nullable=False, index=True)
    total_reps = Column(Integer, default=0)
    average_score = Column(Integer, default=0)
    grade = Column(String(8), default='N/A')
    rom_min = Column(Integer, default=0)
    rom_max = Column(Integer, default=0)
    rom_average = Column(Integer, default=0)
    rom_range = Column(Integer, default=0)
    duration_seconds = Column(Integer, default=0)
    rep_scores = Column(JSON, default=list)
    form_quality = Column(JSON, default=dict)
    joint_rom = Column(JSON)
    recommendations = Column(JSON, default=list)
    created_at = Column(DateTime, default=func.now())
