from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    TRAINING_DATABASE_URL: str = ""
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    TRAINING_REDIS_HOST: str = "redis"
    TRAINING_REDIS_PORT: int = 6379
    TRAINING_REDIS_DB: int = 0
    TRAINING_REDIS_PASSWORD: str | None = None
    EXERCISE_LIST_TTL_SECONDS: int = 5 * 60
    SEED_CATALOG_ON_STARTUP: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
