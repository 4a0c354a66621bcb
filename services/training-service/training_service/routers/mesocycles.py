from datetime import date
from typing import List

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..dependencies import get_current_user_id, get_db, get_today
from ..services.mesocycle_service import MesocycleService

router = APIRouter(prefix="/mesocycles", tags=["Mesocycles"])

logger = structlog.get_logger(__name__)


def get_mesocycle_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> MesocycleService:
    return MesocycleService(db, user_id)


@router.get("", response_model=List[schemas.MesocycleListItem])
async def list_mesocycles(service: MesocycleService = Depends(get_mesocycle_service)):
    return await service.list_mesocycles()


@router.post("", response_model=schemas.MesocycleResponse, status_code=status.HTTP_201_CREATED)
async def create_mesocycle(
    payload: schemas.MesocycleCreate,
    service: MesocycleService = Depends(get_mesocycle_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info(
        "mesocycle_create_requested",
        user_id=user_id,
        name=payload.name,
        duration_in_weeks=payload.duration_in_weeks,
        training_days_per_week=payload.training_days_per_week,
    )
    return await service.create_mesocycle(payload)


@router.get("/{mesocycle_id}", response_model=schemas.MesocycleResponse)
async def get_mesocycle(mesocycle_id: int, service: MesocycleService = Depends(get_mesocycle_service)):
    return await service.get_mesocycle(mesocycle_id)


@router.delete("/{mesocycle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_mesocycle(mesocycle_id: int, service: MesocycleService = Depends(get_mesocycle_service)):
    await service.delete_mesocycle(mesocycle_id)
    return None


@router.post("/{mesocycle_id}/start", response_model=schemas.MesocycleResponse)
async def start_mesocycle(
    mesocycle_id: int,
    payload: schemas.MesocycleStart | None = None,
    service: MesocycleService = Depends(get_mesocycle_service),
    today: date = Depends(get_today),
):
    start_date = payload.start_date if payload else None
    return await service.start_mesocycle(mesocycle_id, start_date, today)


@router.post("/{mesocycle_id}/stop", response_model=schemas.MesocycleResponse)
async def stop_mesocycle(
    mesocycle_id: int,
    service: MesocycleService = Depends(get_mesocycle_service),
    today: date = Depends(get_today),
):
    return await service.stop_mesocycle(mesocycle_id, today)


@router.get("/{mesocycle_id}/runs", response_model=List[schemas.MesocycleRunResponse])
async def list_runs(mesocycle_id: int, service: MesocycleService = Depends(get_mesocycle_service)):
    return await service.list_runs(mesocycle_id)


@router.get("/{mesocycle_id}/runs/{run_id}", response_model=schemas.MesocycleRunDetailResponse)
async def get_run(mesocycle_id: int, run_id: int, service: MesocycleService = Depends(get_mesocycle_service)):
    return await service.get_run(mesocycle_id, run_id)
