from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class SessionReportBase(BaseModel):
    session_id: str
    patient_id: Optional[str] = None
    exercise_type: str
    total_reps: int = 0
    average_score: int = 0
    grade: str = 'N/A'
    rom_min: int = 0
    rom_max: int = 0
    rom_average: int = 0
    rom_range: int = 0
    duration_seconds: int = 0
    rep_scores: List[int] = Field(default_factory=list)
    form_quality: Dict[str, Any] = Field(default_factory=dict)
    joint_rom: Optional[Dict[str, Any]] = None
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)


class SessionReportCreateRequest(SessionReportBase):
    pass


class SessionReportResponse(SessionReportBase):
    report_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
