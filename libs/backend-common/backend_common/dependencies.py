from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date

import structlog
from fastapi import HTTPException, Request, status
from sentry_sdk import set_tag, set_user
from sqlalchemy.ext.asyncio import AsyncSession


def make_get_db_async(
    async_session_factory: Callable[[], AsyncSession],
) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    async def get_db() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_factory() as session:
            yield session

    return get_db


def make_get_current_user_id(
    service_name: str,
    header_name: str = "x-user-id",
    error_status_code: int = status.HTTP_401_UNAUTHORIZED,
    error_detail: str = "X-User-Id header required",
) -> Callable[[Request], Awaitable[str]]:
    async def get_current_user_id(request: Request) -> str:
        user_id = request.headers.get(header_name)
        if not user_id:
            raise HTTPException(status_code=error_status_code, detail=error_detail)
        set_user({"id": str(user_id)})
        set_tag("service", service_name)
        structlog.contextvars.bind_contextvars(user_id=str(user_id))
        return user_id

    return get_current_user_id


def get_today() -> date:
    """Calendar date used as "today" by request handlers; overridable in tests."""
    return date.today()
