from sqlalchemy import Column, DateTime, Integer, String, Text

from .base import Base, utcnow


class Notification(Base):
    """Pending one-shot message; at most one row per user."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, unique=True)
    kind = Column(String(16), nullable=False)  # success | error
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, kind={self.kind})>"
