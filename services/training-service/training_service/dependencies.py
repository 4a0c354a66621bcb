from backend_common.dependencies import get_today, make_get_current_user_id, make_get_db_async
from sqlalchemy.ext.asyncio import AsyncSession

from .database import AsyncSessionLocal

get_db: AsyncSession = make_get_db_async(AsyncSessionLocal)  # type: ignore[assignment]
get_current_user_id = make_get_current_user_id("training-service")

__all__ = ["get_db", "get_current_user_id", "get_today"]
