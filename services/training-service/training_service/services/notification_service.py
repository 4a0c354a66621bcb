import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Notification

logger = structlog.get_logger(__name__)

SUCCESS = "success"


class NotificationService:
    """At-most-one pending message per user.

    ``queue`` only stages the row; it is committed by the caller together with
    the mutation it reports on.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def queue(self, text: str, kind: str = SUCCESS) -> Notification:
        await self.db.execute(delete(Notification).where(Notification.user_id == self.user_id))
        notification = Notification(user_id=self.user_id, kind=kind, text=text)
        self.db.add(notification)
        return notification

    async def consume_next(self) -> Notification | None:
        result = await self.db.execute(select(Notification).where(Notification.user_id == self.user_id))
        notification = result.scalars().first()
        if notification is None:
            return None
        await self.db.delete(notification)
        await self.db.commit()
        logger.info("notification_consumed", user_id=self.user_id, notification_id=notification.id)
        return notification
