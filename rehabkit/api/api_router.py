from fastapi import APIRouter

from rehabkit.api import api_healthcheck, api_scoring, api_exercise_session, api_session_report

router = APIRouter()

router.include_router(api_healthcheck.router, tags=["health-check"], prefix="/healthcheck")
router.include_router(api_scoring.router, tags=["scoring"], prefix="/scoring")
router.include_router(api_exercise_session.router, tags=["exercise-session"], prefix="/exercise-sessions")
router.include_router(api_session_report.router, tags=["session-report"], prefix="/session-reports")
