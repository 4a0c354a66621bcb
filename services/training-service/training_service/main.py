import structlog
from backend_common.fastapi_app import create_service_app
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import AsyncSessionLocal, engine
from .exceptions import FieldValidationException, InvalidStateException, NotFoundException
from .logging_config import configure_logging
from .models import Base
from .redis_client import close_redis, init_redis
from .routers.exercises import router as exercises_router
from .routers.mesocycles import router as mesocycles_router
from .routers.notifications import router as notifications_router
from .routers.sessions import current_day_router
from .routers.sessions import router as sessions_router
from .routers.training_days import router as training_days_router
from .scripts.seed_catalog import seed_catalog

configure_logging()
logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"

app = create_service_app(
    title="training-service",
    version="0.1.0",
    description="Mesocycle planning, training-day sessions and progress tracking",
)


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(FieldValidationException)
async def field_validation_exception_handler(request: Request, exc: FieldValidationException):
    logger.info("request_field_validation_failed", path=request.url.path, fields=sorted(exc.errors))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "errors": exc.errors})


@app.exception_handler(InvalidStateException)
async def invalid_state_exception_handler(request: Request, exc: InvalidStateException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if get_settings().SEED_CATALOG_ON_STARTUP:
        async with AsyncSessionLocal() as db:
            await seed_catalog(db)

    await init_redis()


@app.on_event("shutdown")
async def shutdown_event():
    await close_redis()
    await engine.dispose()


health_router = APIRouter()


@health_router.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(health_router, prefix=API_PREFIX)
app.include_router(exercises_router, prefix=API_PREFIX)
app.include_router(mesocycles_router, prefix=API_PREFIX)
app.include_router(training_days_router, prefix=API_PREFIX)
app.include_router(current_day_router, prefix=API_PREFIX)
app.include_router(sessions_router, prefix=API_PREFIX)
app.include_router(notifications_router, prefix=API_PREFIX)
