from datetime import UTC, datetime

from ..database import Base


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


__all__ = ["Base", "utcnow"]
