from typing import List

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..dependencies import get_current_user_id, get_db
from ..services.exercise_service import ExerciseService

router = APIRouter(tags=["Exercises"])

logger = structlog.get_logger(__name__)


def get_exercise_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> ExerciseService:
    return ExerciseService(db, user_id)


@router.get("/muscle-groups", response_model=List[schemas.MuscleGroupResponse])
async def list_muscle_groups(service: ExerciseService = Depends(get_exercise_service)):
    return await service.list_muscle_groups()


@router.get("/exercises", response_model=schemas.ExerciseListResponse)
async def search_exercises(
    query: str | None = Query(None, description="Free-text search over exercise names and muscle groups"),
    service: ExerciseService = Depends(get_exercise_service),
):
    return await service.search(query)


@router.post("/exercises", response_model=schemas.ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    payload: schemas.ExerciseCreate,
    service: ExerciseService = Depends(get_exercise_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("exercise_create_requested", user_id=user_id, name=payload.name)
    return await service.create_exercise(payload)


@router.get("/exercises/{exercise_id}", response_model=schemas.ExerciseResponse)
async def get_exercise(exercise_id: int, service: ExerciseService = Depends(get_exercise_service)):
    return await service.get_exercise(exercise_id)


@router.post("/exercises/delete", response_model=schemas.ExerciseDeleteResponse)
async def delete_exercises(
    payload: schemas.ExerciseDeleteRequest,
    service: ExerciseService = Depends(get_exercise_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("exercise_delete_requested", user_id=user_id, exercise_ids=payload.exercise_ids)
    deleted = await service.delete_exercises(payload.exercise_ids)
    return schemas.ExerciseDeleteResponse(deleted=deleted)
