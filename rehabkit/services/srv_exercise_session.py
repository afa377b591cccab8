"""
Exercise Session Service - Business Logic Layer.

Keeps live exercise sessions in memory and feeds them frames.
The scoring itself happens in ``rehabkit.scoring``; this layer only owns
session lookup, expiry and logging.

Author: RehabKit Team
Version: 1.0.0
"""

import logging
import time
from typing import Dict, Optional

from rehabkit.core.config import settings
from rehabkit.helpers.exception_handler import CustomException
from rehabkit.schemas.sche_scoring import (
    StartSessionRequest, StartSessionResponse, ProcessFrameRequest, ProcessFrameResponse,
    SessionStatusResponse, ServiceHealthResponse, ExerciseStateResponse, FeedbackReportResponse, SessionStatus,
)
from rehabkit.scoring.core import ExerciseKind
from rehabkit.scoring.modules import ExerciseSession
from rehabkit.scoring.utils import SessionLogger


# ==================== CONSTANTS ====================

SERVICE_VERSION = "1.0.0"


# ==================== SESSION CLASS ====================

class ActiveSession:
    """A live exercise session plus its bookkeeping."""

    def __init__(self, session: ExerciseSession, patient_id: Optional[str] = None):
        self.session = session
        self.patient_id = patient_id
        self.created_at = time.time()
        self.last_activity = time.time()

    @property
    def session_id(self) -> str:
        return self.session.session_id

    def update_activity(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = time.time()

    def is_expired(self, timeout: int = None) -> bool:
        """Check if session has expired."""
        timeout = settings.SESSION_TIMEOUT if timeout is None else timeout
        return time.time() - self.last_activity > timeout


# ==================== SERVICE CLASS ====================

class ExerciseSessionService:
    """
    Service for live exercise sessions.

    Sessions are held in memory only; the final report is persisted by
    ``SessionReportService`` once the session ends.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._sessions: Dict[str, ActiveSession] = {}
        self.logger.info("ExerciseSessionService initialized")

    # ==================== SESSION MANAGEMENT ====================

    def start_session(self, request: StartSessionRequest) -> StartSessionResponse:
        """Start a new exercise session for a supported exercise."""
        self.logger.info(f"start_session: patient_id={request.patient_id}, exercise={request.exercise_type}")

        kind = ExerciseKind.from_label(request.exercise_type)
        if kind is ExerciseKind.UNKNOWN:
            raise CustomException(http_code=400, code='400', message=f"Exercise type not recognized: {request.exercise_type}")

        self._cleanup_expired_sessions()

        session = ExerciseSession(kind)
        if settings.SESSION_LOG_ENABLED:
            session.logger = SessionLogger(session.session_id, settings.SESSION_LOG_DIR)

        self._sessions[session.session_id] = ActiveSession(session, patient_id=request.patient_id)

        self.logger.info(f"start_session success: session_id={session.session_id}")

        return StartSessionResponse(
            session_id=session.session_id,
            exercise_type=kind.value,
            status=SessionStatus.ACTIVE,
            phase=getattr(session.phase, "value", session.phase),
        )

    def get_session(self, session_id: str) -> ActiveSession:
        """Get session by ID, validate not expired."""
        active = self._sessions.get(session_id)
        if not active:
            raise CustomException(http_code=404, code='404', message=f"Session not found: {session_id}")

        if active.is_expired():
            self._remove_session(session_id)
            raise CustomException(http_code=404, code='404', message=f"Session expired: {session_id}")

        active.update_activity()
        return active

    # ==================== FRAME PROCESSING ====================

    def process_frame(self, session_id: str, request: ProcessFrameRequest) -> ProcessFrameResponse:
        """Classify one frame within its session."""
        active = self.get_session(session_id)
        state = active.session.process_frame(request.angles, request.timestamp_ms)

        if state.rep_completed:
            self.logger.info(f"process_frame: session_id={session_id}, rep={active.session.rep_count}, score={state.score}")

        return ProcessFrameResponse(
            session_id=session_id,
            state=ExerciseStateResponse(**state.to_dict()),
            feedback_report=FeedbackReportResponse(**active.session.last_feedback.to_dict()),
            rep_count=active.session.rep_count,
        )

    def get_status(self, session_id: str) -> SessionStatusResponse:
        active = self.get_session(session_id)
        return SessionStatusResponse(**active.session.status())

    # ==================== SESSION END ====================

    def end_session(self, session_id: str) -> ActiveSession:
        """Detach a session from the service once its report is saved."""
        self.logger.info(f"end_session: session_id={session_id}")

        active = self.get_session(session_id)
        self._remove_session(session_id)

        session_logger = active.session.logger
        if session_logger is not None:
            try:
                log_file = session_logger.save_session_log()
                self.logger.debug(f"end_session: session log written to {log_file}")
            except OSError as e:
                self.logger.warning(f"end_session: Failed to write session log: {e}")

        duration = int(time.time() - active.created_at)
        self.logger.info(f"end_session success: session_id={session_id}, reps={active.session.rep_count}, duration={duration}s")

        return active

    # ==================== HEALTH CHECK ====================

    def get_health(self) -> ServiceHealthResponse:
        """Get service health status."""
        return ServiceHealthResponse(
            status="healthy",
            active_sessions=len(self._sessions),
            version=SERVICE_VERSION
        )

    # ==================== INTERNAL METHODS ====================

    def _remove_session(self, session_id: str) -> None:
        """Remove session from memory."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            self.logger.debug(f"_remove_session: Removed {session_id}")

    def _cleanup_expired_sessions(self) -> int:
        """Cleanup expired sessions. Returns count of removed sessions."""
        expired = [sid for sid, s in self._sessions.items() if s.is_expired()]

        for sid in expired:
            self._remove_session(sid)

        if expired:
            self.logger.info(f"_cleanup_expired_sessions: Removed {len(expired)} sessions")

        return len(expired)


# ==================== SINGLETON INSTANCE ====================

exercise_session_service = ExerciseSessionService()
