from urllib.parse import urlparse

import structlog
from backend_common.database import create_async_engine_and_session, ensure_asyncpg_url
from dotenv import load_dotenv
from sqlalchemy.orm import declarative_base

from .config import get_settings

load_dotenv()

logger = structlog.get_logger(__name__)

settings = get_settings()
DATABASE_URL = settings.TRAINING_DATABASE_URL

if not DATABASE_URL:
    raise ValueError("TRAINING_DATABASE_URL environment variable is not set")

DATABASE_URL = ensure_asyncpg_url(DATABASE_URL)
logger.info("training_db_url_configured", scheme=urlparse(DATABASE_URL).scheme)

engine, AsyncSessionLocal = create_async_engine_and_session(
    DATABASE_URL,
    echo=settings.DEBUG,
    expire_on_commit=False,
    autoflush=False,
)
Base = declarative_base()
