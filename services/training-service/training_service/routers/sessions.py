from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..dependencies import get_current_user_id, get_db, get_today
from ..services.session_service import SessionService

router = APIRouter(prefix="/sessions", tags=["Sessions"])
current_day_router = APIRouter(prefix="/training-days", tags=["Sessions"])


def get_session_service(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
) -> SessionService:
    return SessionService(db, user_id, today)


@current_day_router.get("/current", response_model=schemas.CurrentDayResponse)
async def get_current_day(
    requested_date: date | None = Query(None, alias="date", description="Calendar date to resolve; defaults to today"),
    service: SessionService = Depends(get_session_service),
):
    return await service.get_current_day(requested_date)


@router.get("/{session_id}", response_model=schemas.CurrentDayResponse)
async def get_session(session_id: int, service: SessionService = Depends(get_session_service)):
    return await service.get_session_day(session_id)


@router.post(
    "/{session_id}/exercises/{exercise_id}/sets",
    response_model=schemas.CurrentDayResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_session_set(
    session_id: int,
    exercise_id: int,
    service: SessionService = Depends(get_session_service),
):
    return await service.add_set(session_id, exercise_id)


@router.patch("/{session_id}/sets/{set_id}", response_model=schemas.CurrentDayResponse)
async def update_session_set(
    session_id: int,
    set_id: int,
    payload: schemas.SessionSetUpdate,
    service: SessionService = Depends(get_session_service),
):
    return await service.update_set(session_id, set_id, payload)


@router.delete("/{session_id}/sets/{set_id}", response_model=schemas.CurrentDayResponse)
async def remove_session_set(
    session_id: int,
    set_id: int,
    service: SessionService = Depends(get_session_service),
):
    return await service.remove_set(session_id, set_id)


@router.post("/{session_id}/finish", response_model=schemas.CurrentDayResponse)
async def finish_session(
    session_id: int,
    payload: schemas.SessionFinish | None = None,
    service: SessionService = Depends(get_session_service),
):
    return await service.finish_session(session_id, payload or schemas.SessionFinish())


@router.post("/{session_id}/reopen", response_model=schemas.CurrentDayResponse)
async def reopen_session(session_id: int, service: SessionService = Depends(get_session_service)):
    return await service.reopen_session(session_id)


@router.get("/{session_id}/summary", response_model=schemas.SessionSummaryResponse)
async def get_session_summary(session_id: int, service: SessionService = Depends(get_session_service)):
    return await service.get_summary(session_id)
