from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..dependencies import get_current_user_id, get_db
from ..services.training_day_service import TrainingDayService

router = APIRouter(prefix="/mesocycles/{mesocycle_id}/training-days", tags=["Training days"])


def get_training_day_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> TrainingDayService:
    return TrainingDayService(db, user_id)


@router.patch("/{day_id}", response_model=schemas.TrainingDayResponse)
async def update_training_day(
    mesocycle_id: int,
    day_id: int,
    payload: schemas.TrainingDayUpdate,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.update_label(mesocycle_id, day_id, payload)


@router.post(
    "/{day_id}/exercises",
    response_model=schemas.TrainingDayResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_training_day_exercise(
    mesocycle_id: int,
    day_id: int,
    payload: schemas.TrainingDayExerciseCreate,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.add_exercise(mesocycle_id, day_id, payload)


@router.put("/{day_id}/exercises/order", response_model=schemas.TrainingDayResponse)
async def reorder_training_day_exercises(
    mesocycle_id: int,
    day_id: int,
    payload: schemas.ExerciseOrderUpdate,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.reorder_exercises(mesocycle_id, day_id, payload)


@router.patch("/{day_id}/exercises/{exercise_id}", response_model=schemas.TrainingDayResponse)
async def update_training_day_exercise(
    mesocycle_id: int,
    day_id: int,
    exercise_id: int,
    payload: schemas.TrainingDayExerciseUpdate,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.update_exercise(mesocycle_id, day_id, exercise_id, payload)


@router.delete("/{day_id}/exercises/{exercise_id}", response_model=schemas.TrainingDayResponse)
async def remove_training_day_exercise(
    mesocycle_id: int,
    day_id: int,
    exercise_id: int,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.remove_exercise(mesocycle_id, day_id, exercise_id)


@router.post(
    "/{day_id}/exercises/{exercise_id}/sets",
    response_model=schemas.TrainingDayResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_training_day_set(
    mesocycle_id: int,
    day_id: int,
    exercise_id: int,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.add_set(mesocycle_id, day_id, exercise_id)


@router.patch("/{day_id}/exercises/{exercise_id}/sets/{set_id}", response_model=schemas.TrainingDayResponse)
async def update_training_day_set(
    mesocycle_id: int,
    day_id: int,
    exercise_id: int,
    set_id: int,
    payload: schemas.TrainingDaySetUpdate,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.update_set(mesocycle_id, day_id, exercise_id, set_id, payload)


@router.delete("/{day_id}/exercises/{exercise_id}/sets/{set_id}", response_model=schemas.TrainingDayResponse)
async def remove_training_day_set(
    mesocycle_id: int,
    day_id: int,
    exercise_id: int,
    set_id: int,
    service: TrainingDayService = Depends(get_training_day_service),
):
    return await service.remove_set(mesocycle_id, day_id, exercise_id, set_id)
