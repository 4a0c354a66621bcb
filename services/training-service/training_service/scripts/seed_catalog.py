import argparse
import asyncio

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import AsyncSessionLocal
from ..models import Exercise, MuscleGroup

logger = structlog.get_logger(__name__)

DEFAULT_MUSCLE_GROUPS: list[str] = [
    "Chest",
    "Back",
    "Shoulders",
    "Biceps",
    "Triceps",
    "Forearms",
    "Quads",
    "Hamstrings",
    "Glutes",
    "Calves",
    "Abs",
    "Traps",
]

# name -> (primary muscle group, other muscle groups)
DEFAULT_EXERCISES: dict[str, tuple[str, list[str]]] = {
    "Barbell Bench Press": ("Chest", ["Triceps", "Shoulders"]),
    "Incline Dumbbell Press": ("Chest", ["Shoulders", "Triceps"]),
    "Barbell Back Squat": ("Quads", ["Glutes"]),
    "Leg Press": ("Quads", ["Glutes"]),
    "Romanian Deadlift": ("Hamstrings", ["Glutes", "Back"]),
    "Lying Leg Curl": ("Hamstrings", []),
    "Pull Up": ("Back", ["Biceps"]),
    "Barbell Row": ("Back", ["Biceps", "Traps"]),
    "Overhead Press": ("Shoulders", ["Triceps"]),
    "Lateral Raise": ("Shoulders", []),
    "Dumbbell Curl": ("Biceps", ["Forearms"]),
    "Cable Triceps Pushdown": ("Triceps", []),
    "Barbell Shrug": ("Traps", []),
    "Standing Calf Raise": ("Calves", []),
    "Hip Thrust": ("Glutes", ["Hamstrings"]),
    "Cable Crunch": ("Abs", []),
}


async def seed_catalog(db: AsyncSession) -> dict[str, int]:
    """Insert missing muscle groups and shared exercises; existing rows are left untouched."""
    result = await db.execute(select(MuscleGroup))
    groups = {g.name: g for g in result.scalars().all()}
    created_groups = 0
    for name in DEFAULT_MUSCLE_GROUPS:
        if name not in groups:
            groups[name] = MuscleGroup(name=name)
            db.add(groups[name])
            created_groups += 1

    result = await db.execute(select(Exercise.name).where(Exercise.user_id.is_(None)))
    existing = set(result.scalars().all())
    created_exercises = 0
    for name, (primary, others) in DEFAULT_EXERCISES.items():
        if name in existing:
            continue
        db.add(
            Exercise(
                user_id=None,
                name=name,
                shared=True,
                primary_muscle_group=groups[primary],
                other_muscle_groups=[groups[o] for o in others],
            )
        )
        created_exercises += 1

    await db.commit()
    stats = {"muscle_groups": created_groups, "exercises": created_exercises}
    logger.info("catalog_seeded", **stats)
    return stats


async def seed() -> None:
    async with AsyncSessionLocal() as db:
        try:
            await seed_catalog(db)
        except Exception:
            await db.rollback()
            raise


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed muscle groups and shared exercises into the database")
    parser.parse_args()
    asyncio.run(seed())


if __name__ == "__main__":
    main()
