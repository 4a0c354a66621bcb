from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..dependencies import get_current_user_id, get_db
from ..services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "/next",
    response_model=schemas.NotificationResponse,
    responses={status.HTTP_204_NO_CONTENT: {"description": "No pending notification"}},
)
async def consume_next_notification(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    notification = await NotificationService(db, user_id).consume_next()
    if notification is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return notification
