from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Mesocycle, MesocycleRun, TrainingSession

FINISHED_STATUSES = ("completed", "reopened")


class TrainingSessionRepository:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def get(self, session_id: int, *, refresh: bool = False) -> Optional[TrainingSession]:
        query = (
            select(TrainingSession)
            .where(TrainingSession.id == session_id)
            .where(TrainingSession.user_id == self.user_id)
        )
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def get_for_slot(self, run_id: int, microcycle_number: int, day_number: int) -> Optional[TrainingSession]:
        result = await self.db.execute(
            select(TrainingSession)
            .where(TrainingSession.run_id == run_id)
            .where(TrainingSession.microcycle_number == microcycle_number)
            .where(TrainingSession.day_number == day_number)
        )
        return result.scalars().first()

    async def get_previous(self, session_date: date, training_day_id: int) -> Optional[TrainingSession]:
        """Most recent finished session of the same training day that happened before ``session_date``."""
        result = await self.db.execute(
            select(TrainingSession)
            .where(TrainingSession.user_id == self.user_id)
            .where(TrainingSession.training_day_id == training_day_id)
            .where(TrainingSession.status.in_(FINISHED_STATUSES))
            .where(TrainingSession.date < session_date)
            .order_by(TrainingSession.date.desc(), TrainingSession.id.desc())
        )
        return result.scalars().first()

    async def list_for_run(self, run_id: int) -> list[TrainingSession]:
        result = await self.db.execute(
            select(TrainingSession)
            .where(TrainingSession.run_id == run_id)
            .where(TrainingSession.user_id == self.user_id)
            .order_by(TrainingSession.date)
        )
        return list(result.scalars().all())

    async def get_run_with_mesocycle(self, run_id: int) -> tuple[Optional[MesocycleRun], Optional[Mesocycle]]:
        result = await self.db.execute(
            select(MesocycleRun, Mesocycle)
            .join(Mesocycle, Mesocycle.id == MesocycleRun.mesocycle_id)
            .where(MesocycleRun.id == run_id)
            .where(MesocycleRun.user_id == self.user_id)
        )
        row = result.first()
        if row is None:
            return None, None
        return row[0], row[1]
