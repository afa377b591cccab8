from fastapi import APIRouter

from rehabkit.schemas.sche_base import DataResponse
from rehabkit.schemas.sche_scoring import ServiceHealthResponse
from rehabkit.services.srv_exercise_session import exercise_session_service

router = APIRouter()


@router.get("", response_model=DataResponse[ServiceHealthResponse])
async def get():
    return DataResponse().success_response(data=exercise_session_service.get_health())
