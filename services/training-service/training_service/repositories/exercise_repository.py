from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Exercise, MuscleGroup


def _visible_to(user_id: str):
    return or_(Exercise.user_id == user_id, Exercise.shared.is_(True))


class ExerciseRepository:
    @staticmethod
    async def list_muscle_groups(db: AsyncSession, ids: list[int] | None = None) -> list[MuscleGroup]:
        query = select(MuscleGroup).order_by(MuscleGroup.name)
        if ids is not None:
            query = query.where(MuscleGroup.id.in_(ids))
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def list_visible(db: AsyncSession, user_id: str, ids: list[int] | None = None) -> list[Exercise]:
        query = select(Exercise).where(_visible_to(user_id)).order_by(Exercise.name, Exercise.id)
        if ids is not None:
            query = query.where(Exercise.id.in_(ids))
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_visible(db: AsyncSession, user_id: str, exercise_id: int) -> Exercise | None:
        result = await db.execute(select(Exercise).where(Exercise.id == exercise_id).where(_visible_to(user_id)))
        return result.scalars().first()

    @staticmethod
    async def name_taken(db: AsyncSession, user_id: str, name: str) -> bool:
        result = await db.execute(
            select(func.count())
            .select_from(Exercise)
            .where(_visible_to(user_id))
            .where(func.lower(Exercise.name) == name.lower())
        )
        return result.scalar_one() > 0

    @staticmethod
    async def list_owned_ids(db: AsyncSession, user_id: str, ids: list[int]) -> list[int]:
        result = await db.execute(
            select(Exercise.id)
            .where(Exercise.id.in_(ids))
            .where(Exercise.user_id == user_id)
            .where(Exercise.shared.is_(False))
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete_many(db: AsyncSession, ids: list[int]) -> int:
        # Core delete so the store enforces the RESTRICT foreign keys itself
        result = await db.execute(delete(Exercise).where(Exercise.id.in_(ids)))
        return result.rowcount
