import structlog
from backend_common.cache import CacheHelper, CacheMetrics
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..config import get_settings
from ..exceptions import FieldValidationException, NotFoundException
from ..metrics import (
    EXERCISE_CACHE_ERRORS_TOTAL,
    EXERCISE_CACHE_HITS_TOTAL,
    EXERCISE_CACHE_MISSES_TOTAL,
)
from ..models import Exercise
from ..redis_client import get_redis, visible_exercises_key
from ..repositories.exercise_repository import ExerciseRepository
from ..search_query import matches_any, normalize_query, validate_query
from .notification_service import NotificationService

logger = structlog.get_logger(__name__)

EXERCISE_IN_USE_MESSAGE = (
    "Some of the selected exercises could not be deleted because they are linked to one or more of your mesocycles."
)


class ExerciseService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.repository = ExerciseRepository()
        self.notifications = NotificationService(db, user_id)
        self._cache = CacheHelper(
            get_redis=get_redis,
            metrics=CacheMetrics(
                hits=EXERCISE_CACHE_HITS_TOTAL,
                misses=EXERCISE_CACHE_MISSES_TOTAL,
                errors=EXERCISE_CACHE_ERRORS_TOTAL,
            ),
            default_ttl=get_settings().EXERCISE_LIST_TTL_SECONDS,
        )

    async def list_muscle_groups(self) -> list[schemas.MuscleGroupResponse]:
        groups = await self.repository.list_muscle_groups(self.db)
        return [schemas.MuscleGroupResponse.model_validate(g) for g in groups]

    async def _load_visible_exercises(self) -> list[schemas.ExerciseResponse]:
        exercises = await self.repository.list_visible(self.db, self.user_id)
        return [schemas.ExerciseResponse.model_validate(e) for e in exercises]

    async def _visible_exercises(self) -> list[schemas.ExerciseResponse]:
        return await self._cache.get_or_load(
            visible_exercises_key(self.user_id),
            self._load_visible_exercises,
            dump=lambda items: [item.model_dump(mode="json") for item in items],
            restore=lambda data: [schemas.ExerciseResponse.model_validate(item) for item in data],
        )

    async def search(self, query: str | None = None) -> schemas.ExerciseListResponse:
        error = validate_query(query)
        if error:
            raise FieldValidationException({"query": error})

        tokens = normalize_query(query)
        visible = await self._visible_exercises()
        matching = [
            e for e in visible if matches_any(tokens, [e.name, *(g.name for g in e.muscle_groups)])
        ]
        return schemas.ExerciseListResponse(
            query=query.strip() if tokens else None,
            no_results=bool(tokens) and not matching,
            exercises=matching,
        )

    async def get_exercise(self, exercise_id: int) -> Exercise:
        exercise = await self.repository.get_visible(self.db, self.user_id, exercise_id)
        if not exercise:
            raise NotFoundException()
        return exercise

    async def create_exercise(self, payload: schemas.ExerciseCreate) -> Exercise:
        errors: dict[str, str] = {}
        if await self.repository.name_taken(self.db, self.user_id, payload.name):
            errors["name"] = "An exercise with that name already exists."

        group_ids = list(dict.fromkeys([payload.primary_muscle_group_id, *payload.other_muscle_group_ids]))
        groups = {g.id: g for g in await self.repository.list_muscle_groups(self.db, group_ids)}
        if payload.primary_muscle_group_id not in groups:
            errors["primary_muscle_group_id"] = "Select a valid muscle group."
        if any(gid not in groups for gid in payload.other_muscle_group_ids):
            errors["other_muscle_group_ids"] = "Select valid muscle groups."
        if errors:
            raise FieldValidationException(errors)

        exercise = Exercise(
            user_id=self.user_id,
            name=payload.name,
            shared=False,
            primary_muscle_group=groups[payload.primary_muscle_group_id],
            other_muscle_groups=[
                groups[gid] for gid in group_ids if gid != payload.primary_muscle_group_id
            ],
        )
        self.db.add(exercise)
        await self.notifications.queue(f'Exercise "{payload.name}" created successfully.')
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise FieldValidationException({"name": "An exercise with that name already exists."})

        await self._cache.invalidate([visible_exercises_key(self.user_id)])
        logger.info("exercise_created", user_id=self.user_id, exercise_id=exercise.id)
        return exercise

    async def delete_exercises(self, exercise_ids: list[int]) -> int:
        requested = list(dict.fromkeys(exercise_ids))
        owned = await self.repository.list_owned_ids(self.db, self.user_id, requested)
        if len(owned) != len(requested):
            raise FieldValidationException({"exercise_ids": "Only your own exercises can be deleted."})

        try:
            deleted = await self.repository.delete_many(self.db, owned)
            await self.notifications.queue(
                "Exercise deleted successfully." if deleted == 1 else "Exercises deleted successfully."
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("exercise_delete_rejected_in_use", user_id=self.user_id, exercise_ids=owned)
            raise FieldValidationException({"exercise_ids": EXERCISE_IN_USE_MESSAGE})

        await self._cache.invalidate([visible_exercises_key(self.user_id)])
        logger.info("exercises_deleted", user_id=self.user_id, exercise_ids=owned, deleted=deleted)
        return deleted
