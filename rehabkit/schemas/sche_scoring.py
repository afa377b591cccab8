"""
Exercise Scoring Schemas - Data Transfer Objects.

Stateless scoring calls and in-memory exercise sessions.

Author: RehabKit Team
Version: 1.0.0
"""

from typing import Optional, Dict, List
from pydantic import BaseModel, Field
from enum import Enum


# ==================== ENUMS ====================

class SessionStatus(str, Enum):
    """Session status."""
    ACTIVE = "active"
    COMPLETED = "completed"


# ==================== REQUEST SCHEMAS ====================

class FormQualityRequest(BaseModel):
    """Score a single frame without a session."""
    angles: Optional[Dict[str, float]] = Field(None, description="Joint angles in degrees, None if no pose")
    exercise_type: str = Field(..., description="Exercise label, e.g. 'knee bends' or 'leg-raise'")
    previous_phase: Optional[str] = Field(None, description="Phase returned for the previous frame")


class RangeOfMotionRequest(BaseModel):
    angle_history: List[float] = Field(default_factory=list, description="Angle readings in degrees")


class SessionScoreRequest(BaseModel):
    rep_scores: List[int] = Field(default_factory=list, description="Score of each completed rep")


class FeedbackReportRequest(BaseModel):
    """Real-time corrections for one frame without a session."""
    angles: Optional[Dict[str, float]] = Field(None, description="Joint angles in degrees, None if no pose")
    exercise_type: str = Field(..., description="Exercise label")
    angle_history: List[float] = Field(default_factory=list, description="Driving-angle readings over the last second")
    previous_angles: Optional[Dict[str, float]] = Field(None, description="Angles of the previous frame")


class StartSessionRequest(BaseModel):
    """Request to start a new exercise session."""
    exercise_type: str = Field(..., description="Exercise label")
    patient_id: Optional[str] = Field(None, description="Patient identifier")


class ProcessFrameRequest(BaseModel):
    """One frame of joint angles from the pose pipeline."""
    angles: Optional[Dict[str, float]] = Field(None, description="Joint angles in degrees, None if no pose")
    timestamp_ms: Optional[float] = Field(None, description="Frame timestamp in milliseconds")


# ==================== RESPONSE SCHEMAS ====================

class ExerciseStateResponse(BaseModel):
    phase: Optional[str] = None
    score: int = 0
    feedback: str = ""
    rep_completed: bool = False


class RangeOfMotionResponse(BaseModel):
    min: int = 0
    max: int = 0
    average: int = 0
    range: int = 0


class SessionScoreResponse(BaseModel):
    total_reps: int = 0
    average_score: int = 0
    grade: str = "N/A"


class RealTimeFeedbackResponse(BaseModel):
    message: str
    severity: str
    audio_cue: Optional[str] = None
    visual_cue: Optional[str] = None
    corrections: List[str] = Field(default_factory=list)


class SpeedAnalysisResponse(BaseModel):
    speed: int = 0
    feedback: str = ""
    is_optimal: bool = False


class FormDeviationResponse(BaseModel):
    joint: str
    change: float
    message: str
    severity: str


class FeedbackReportResponse(BaseModel):
    real_time: RealTimeFeedbackResponse
    speed: SpeedAnalysisResponse
    deviations: List[FormDeviationResponse] = Field(default_factory=list)
    overall_quality: int = 0


class StartSessionResponse(BaseModel):
    session_id: str = Field(..., description="Unique session identifier")
    exercise_type: str
    status: SessionStatus = SessionStatus.ACTIVE
    phase: Optional[str] = None


class ProcessFrameResponse(BaseModel):
    session_id: str
    state: ExerciseStateResponse
    feedback_report: Optional[FeedbackReportResponse] = None
    rep_count: int = 0


class SessionStatusResponse(BaseModel):
    session_id: str
    exercise_type: str
    phase: Optional[str] = None
    rep_count: int = 0
    frame_count: int = 0
    last_score: int = 0
    last_feedback: str = ""


class ServiceHealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    active_sessions: int = Field(..., description="Active sessions count")
    version: str = Field(..., description="Service version")
