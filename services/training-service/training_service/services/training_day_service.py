"""Editing of training-day templates.

Template edits are allowed while a mesocycle is a draft or active; they change
what future sessions are materialized from and never touch sessions that
already exist.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..exceptions import FieldValidationException, MesocycleReadOnlyException, NotFoundException
from ..models import Mesocycle, TrainingDay, TrainingDayExercise, TrainingDaySet
from ..repositories.exercise_repository import ExerciseRepository
from ..schemas.mesocycle import REP_RANGE_MESSAGE
from ..set_sequence import next_set_values, remove_and_renumber
from .mesocycle_service import MesocycleService, build_template_exercise

logger = structlog.get_logger(__name__)


class TrainingDayService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.mesocycles = MesocycleService(db, user_id)

    async def _get_editable_day(self, mesocycle_id: int, day_id: int) -> tuple[Mesocycle, TrainingDay]:
        mesocycle = await self.mesocycles.get_mesocycle(mesocycle_id)
        day = next((d for d in mesocycle.training_days if d.id == day_id), None)
        if day is None:
            raise NotFoundException()
        if mesocycle.status == "completed":
            raise MesocycleReadOnlyException()
        return mesocycle, day

    @staticmethod
    def _get_exercise(day: TrainingDay, exercise_id: int) -> TrainingDayExercise:
        exercise = next((e for e in day.exercises if e.id == exercise_id), None)
        if exercise is None:
            raise NotFoundException()
        return exercise

    @staticmethod
    def _get_set(exercise: TrainingDayExercise, set_id: int) -> TrainingDaySet:
        template_set = next((s for s in exercise.sets if s.id == set_id), None)
        if template_set is None:
            raise NotFoundException()
        return template_set

    async def _save(self, mesocycle: Mesocycle, day_id: int, event: str, **context) -> TrainingDay:
        await self.db.commit()
        logger.info(event, user_id=self.user_id, mesocycle_id=mesocycle.id, training_day_id=day_id, **context)
        mesocycle = await self.mesocycles.get_mesocycle(mesocycle.id, refresh=True)
        return next(d for d in mesocycle.training_days if d.id == day_id)

    async def update_label(self, mesocycle_id: int, day_id: int, payload: schemas.TrainingDayUpdate) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        day.label = payload.label.strip()
        return await self._save(mesocycle, day.id, "training_day_renamed")

    async def add_exercise(
        self, mesocycle_id: int, day_id: int, payload: schemas.TrainingDayExerciseCreate
    ) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        catalog_exercise = await ExerciseRepository.get_visible(self.db, self.user_id, payload.exercise_id)
        if catalog_exercise is None:
            raise FieldValidationException({"exercise_id": "Select a valid exercise."})

        number = max((e.number for e in day.exercises), default=0) + 1
        day.exercises.append(build_template_exercise(number, catalog_exercise, payload))
        return await self._save(mesocycle, day.id, "training_day_exercise_added", exercise_id=payload.exercise_id)

    async def update_exercise(
        self, mesocycle_id: int, day_id: int, exercise_id: int, payload: schemas.TrainingDayExerciseUpdate
    ) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        exercise = self._get_exercise(day, exercise_id)
        exercise.notes = payload.notes
        return await self._save(mesocycle, day.id, "training_day_exercise_updated", exercise_id=exercise_id)

    async def remove_exercise(self, mesocycle_id: int, day_id: int, exercise_id: int) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        exercise = self._get_exercise(day, exercise_id)
        remove_and_renumber(day.exercises, exercise)
        return await self._save(mesocycle, day.id, "training_day_exercise_removed", exercise_id=exercise_id)

    async def reorder_exercises(
        self, mesocycle_id: int, day_id: int, payload: schemas.ExerciseOrderUpdate
    ) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        by_id = {e.id: e for e in day.exercises}
        if sorted(payload.exercise_ids) != sorted(by_id):
            raise FieldValidationException({"exercise_ids": "The order must list every exercise of the day once."})

        for number, exercise_id in enumerate(payload.exercise_ids, start=1):
            by_id[exercise_id].number = number
        day.exercises.sort(key=lambda e: e.number)
        return await self._save(mesocycle, day.id, "training_day_exercises_reordered")

    async def add_set(self, mesocycle_id: int, day_id: int, exercise_id: int) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        exercise = self._get_exercise(day, exercise_id)
        exercise.sets.append(TrainingDaySet(**next_set_values(exercise.sets)))
        return await self._save(mesocycle, day.id, "training_day_set_added", exercise_id=exercise_id)

    async def update_set(
        self,
        mesocycle_id: int,
        day_id: int,
        exercise_id: int,
        set_id: int,
        payload: schemas.TrainingDaySetUpdate,
    ) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        template_set = self._get_set(self._get_exercise(day, exercise_id), set_id)

        changes = payload.model_dump(exclude_unset=True)
        lower = changes.get("rep_range_lower_bound", template_set.rep_range_lower_bound)
        upper = changes.get("rep_range_upper_bound", template_set.rep_range_upper_bound)
        if lower is None or upper is None or lower > upper:
            raise FieldValidationException({"rep_range_upper_bound": REP_RANGE_MESSAGE})
        if "rir" in changes and changes["rir"] is None:
            raise FieldValidationException({"rir": "Enter the reps in reserve."})

        for field, value in changes.items():
            setattr(template_set, field, value)
        return await self._save(mesocycle, day.id, "training_day_set_updated", set_id=set_id)

    async def remove_set(self, mesocycle_id: int, day_id: int, exercise_id: int, set_id: int) -> TrainingDay:
        mesocycle, day = await self._get_editable_day(mesocycle_id, day_id)
        exercise = self._get_exercise(day, exercise_id)
        remove_and_renumber(exercise.sets, self._get_set(exercise, set_id))
        return await self._save(mesocycle, day.id, "training_day_set_removed", set_id=set_id)
