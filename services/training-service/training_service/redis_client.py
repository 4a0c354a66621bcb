"""Redis client utilities for training-service."""

from __future__ import annotations

from typing import Optional

import structlog
from redis.asyncio import Redis

from .config import get_settings

logger = structlog.get_logger(__name__)

redis_client: Optional[Redis] = None


def visible_exercises_key(user_id: str) -> str:
    return f"exercises:visible:{user_id}"


async def init_redis() -> None:
    global redis_client

    settings = get_settings()
    if not settings.TRAINING_REDIS_HOST:
        logger.info("training_redis_disabled")
        redis_client = None
        return

    try:
        redis_client = Redis(
            host=settings.TRAINING_REDIS_HOST,
            port=settings.TRAINING_REDIS_PORT,
            db=settings.TRAINING_REDIS_DB,
            password=settings.TRAINING_REDIS_PASSWORD,
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=30,
        )
        await redis_client.ping()
        logger.info(
            "training_redis_connected",
            host=settings.TRAINING_REDIS_HOST,
            port=settings.TRAINING_REDIS_PORT,
            db=settings.TRAINING_REDIS_DB,
        )
    except Exception as exc:
        logger.error("training_redis_connection_failed", error=str(exc))
        redis_client = None


async def get_redis() -> Optional[Redis]:
    return redis_client


async def close_redis() -> None:
    global redis_client

    if redis_client is None:
        return

    try:
        await redis_client.aclose()
        logger.info("training_redis_closed")
    except Exception as exc:
        logger.warning("training_redis_close_failed", error=str(exc))
    finally:
        redis_client = None
