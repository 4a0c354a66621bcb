from datetime import date

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..calendar_resolver import MesocycleSchedule
from ..exceptions import (
    FieldValidationException,
    InvalidStateException,
    MesocycleNotActiveException,
    NotFoundException,
)
from ..metrics import MESOCYCLE_RUNS_TOTAL, MESOCYCLES_CREATED_TOTAL
from ..models import Mesocycle, MesocycleRun, TrainingDay, TrainingDayExercise, TrainingDaySet
from ..repositories.exercise_repository import ExerciseRepository
from ..repositories.training_session_repository import TrainingSessionRepository
from ..set_performance import summarize_session
from ..set_sequence import next_set_values
from .notification_service import NotificationService

logger = structlog.get_logger(__name__)

NAME_TAKEN_MESSAGE = "A mesocycle with that name already exists."
WEEK_LENGTH = 7


def schedule_for(mesocycle: Mesocycle, start_date: date | None = None) -> MesocycleSchedule:
    return MesocycleSchedule.build(
        start_date=start_date or mesocycle.start_date,
        duration_in_weeks=mesocycle.duration_in_weeks,
        microcycle_length=mesocycle.microcycle_length,
        rest_days=mesocycle.rest_days or [],
        training_day_ids=[day.id for day in sorted(mesocycle.training_days, key=lambda d: d.number)],
    )


def close_run(mesocycle: Mesocycle, run: MesocycleRun | None, end_date: date) -> None:
    if run is not None:
        run.end_date = max(end_date, run.start_date)
    mesocycle.status = "completed"


def build_template_exercise(number: int, exercise, payload: schemas.TrainingDayExerciseCreate) -> TrainingDayExercise:
    sets = [TrainingDaySet(number=i, **s.model_dump()) for i, s in enumerate(payload.sets, start=1)]
    if not sets:
        sets = [TrainingDaySet(**next_set_values([]))]
    return TrainingDayExercise(number=number, exercise=exercise, notes=payload.notes, sets=sets)


class MesocycleService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.notifications = NotificationService(db, user_id)
        self.sessions = TrainingSessionRepository(db, user_id)

    async def get_mesocycle(self, mesocycle_id: int, *, refresh: bool = False) -> Mesocycle:
        query = select(Mesocycle).where(Mesocycle.id == mesocycle_id).where(Mesocycle.user_id == self.user_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        mesocycle = result.scalars().first()
        if not mesocycle:
            raise NotFoundException()
        return mesocycle

    async def get_active_mesocycle(self) -> Mesocycle | None:
        result = await self.db.execute(
            select(Mesocycle).where(Mesocycle.user_id == self.user_id).where(Mesocycle.status == "active")
        )
        return result.scalars().first()

    async def get_latest_run(self) -> MesocycleRun | None:
        result = await self.db.execute(
            select(MesocycleRun)
            .where(MesocycleRun.user_id == self.user_id)
            .order_by(MesocycleRun.start_date.desc(), MesocycleRun.id.desc())
        )
        return result.scalars().first()

    async def list_mesocycles(self) -> list[Mesocycle]:
        result = await self.db.execute(
            select(Mesocycle)
            .where(Mesocycle.user_id == self.user_id)
            .order_by(Mesocycle.created_at.desc(), Mesocycle.id.desc())
        )
        return list(result.scalars().all())

    async def _name_taken(self, name: str) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(Mesocycle)
            .where(Mesocycle.user_id == self.user_id)
            .where(func.lower(Mesocycle.name) == name.lower())
        )
        return result.scalar_one() > 0

    async def create_mesocycle(self, payload: schemas.MesocycleCreate) -> Mesocycle:
        errors: dict[str, str] = {}
        if await self._name_taken(payload.name):
            errors["name"] = NAME_TAKEN_MESSAGE

        days_per_week = payload.training_days_per_week
        if len(payload.training_days) != days_per_week:
            errors["training_days"] = f"Add exactly {days_per_week} training day(s)."

        rest_days = (
            list(payload.rest_days) if payload.rest_days is not None else list(range(days_per_week, WEEK_LENGTH))
        )
        microcycle_length = days_per_week + len(rest_days)
        if len(set(rest_days)) != len(rest_days) or any(r < 0 or r >= microcycle_length for r in rest_days):
            errors["rest_days"] = "Rest days must be distinct positions inside the microcycle."

        exercise_ids = sorted({e.exercise_id for day in payload.training_days for e in day.exercises})
        catalog = {}
        if exercise_ids:
            catalog = {e.id: e for e in await ExerciseRepository.list_visible(self.db, self.user_id, exercise_ids)}
        for i, day in enumerate(payload.training_days):
            for j, exercise in enumerate(day.exercises):
                if exercise.exercise_id not in catalog:
                    errors[f"training_days.{i}.exercises.{j}.exercise_id"] = "Select a valid exercise."

        if errors:
            raise FieldValidationException(errors)

        mesocycle = Mesocycle(
            user_id=self.user_id,
            name=payload.name,
            goal=payload.goal,
            duration_in_weeks=payload.duration_in_weeks,
            training_days_per_week=days_per_week,
            microcycle_length=microcycle_length,
            rest_days=sorted(rest_days),
            status="draft",
            runs=[],
            training_days=[
                TrainingDay(
                    number=i,
                    label=day.label,
                    exercises=[
                        build_template_exercise(j, catalog[e.exercise_id], e)
                        for j, e in enumerate(day.exercises, start=1)
                    ],
                )
                for i, day in enumerate(payload.training_days, start=1)
            ],
        )
        self.db.add(mesocycle)
        await self.notifications.queue(f'Mesocycle "{payload.name}" created successfully.')
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise FieldValidationException({"name": NAME_TAKEN_MESSAGE})

        MESOCYCLES_CREATED_TOTAL.inc()
        logger.info("mesocycle_created", user_id=self.user_id, mesocycle_id=mesocycle.id)
        return await self.get_mesocycle(mesocycle.id, refresh=True)

    async def delete_mesocycle(self, mesocycle_id: int) -> None:
        mesocycle = await self.get_mesocycle(mesocycle_id)
        name = mesocycle.name
        await self.db.delete(mesocycle)
        await self.notifications.queue(f'Mesocycle "{name}" deleted successfully.')
        await self.db.commit()
        logger.info("mesocycle_deleted", user_id=self.user_id, mesocycle_id=mesocycle_id)

    async def start_mesocycle(self, mesocycle_id: int, start_date: date | None, today: date) -> Mesocycle:
        mesocycle = await self.get_mesocycle(mesocycle_id)
        if mesocycle.status == "active":
            raise InvalidStateException("The mesocycle is already active")
        if await self.get_active_mesocycle() is not None:
            raise InvalidStateException("Another mesocycle is already active")

        start = start_date or today
        latest = await self.get_latest_run()
        if latest is not None and latest.end_date is not None and start < latest.end_date:
            raise FieldValidationException(
                {"start_date": "The start date must not be earlier than the end of your previous run."}
            )

        mesocycle.status = "active"
        mesocycle.start_date = start
        mesocycle.runs.append(MesocycleRun(user_id=self.user_id, start_date=start))
        await self.notifications.queue(f'Mesocycle "{mesocycle.name}" started successfully.')
        await self.db.commit()

        MESOCYCLE_RUNS_TOTAL.labels(event="started").inc()
        logger.info("mesocycle_started", user_id=self.user_id, mesocycle_id=mesocycle.id, start_date=str(start))
        return await self.get_mesocycle(mesocycle.id, refresh=True)

    async def stop_mesocycle(self, mesocycle_id: int, today: date) -> Mesocycle:
        mesocycle = await self.get_mesocycle(mesocycle_id)
        if mesocycle.status != "active":
            raise MesocycleNotActiveException()

        run = mesocycle.open_run
        close_run(mesocycle, run, min(today, schedule_for(mesocycle).end_date))
        await self.notifications.queue(f'Mesocycle "{mesocycle.name}" stopped.')
        await self.db.commit()

        MESOCYCLE_RUNS_TOTAL.labels(event="stopped").inc()
        logger.info(
            "mesocycle_stopped",
            user_id=self.user_id,
            mesocycle_id=mesocycle.id,
            run_id=getattr(run, "id", None),
        )
        return await self.get_mesocycle(mesocycle.id, refresh=True)

    async def list_runs(self, mesocycle_id: int) -> list[MesocycleRun]:
        mesocycle = await self.get_mesocycle(mesocycle_id)
        return sorted(mesocycle.runs, key=lambda r: (r.start_date, r.id), reverse=True)

    async def get_run(self, mesocycle_id: int, run_id: int) -> schemas.MesocycleRunDetailResponse:
        mesocycle = await self.get_mesocycle(mesocycle_id)
        run = next((r for r in mesocycle.runs if r.id == run_id), None)
        if run is None:
            raise NotFoundException()

        labels = {day.id: day.label for day in mesocycle.training_days}
        items = []
        for session in await self.sessions.list_for_run(run.id):
            previous = await self.sessions.get_previous(session.date, session.training_day_id)
            summary = summarize_session(session.exercises, previous.exercises if previous else ())
            items.append(
                schemas.RunSessionResponse(
                    id=session.id,
                    date=session.date,
                    microcycle_number=session.microcycle_number,
                    day_number=session.day_number,
                    training_day_id=session.training_day_id,
                    label=labels.get(session.training_day_id),
                    status=session.status,
                    completed_at=session.completed_at,
                    feedback=session.feedback,
                    sets=summary.sets,
                    total_volume=summary.total_volume,
                    progressions=summary.progressions,
                )
            )

        return schemas.MesocycleRunDetailResponse(
            id=run.id,
            mesocycle_id=mesocycle.id,
            mesocycle_name=mesocycle.name,
            start_date=run.start_date,
            end_date=run.end_date,
            sessions=items,
        )
