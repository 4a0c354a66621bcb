import os
import uuid
from collections.abc import Sequence
from typing import Any

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

_LOCATION_ROOTS = ("body", "query", "path")
_VALUE_ERROR_PREFIX = "Value error, "


def cors_origins_from_env(origins_env: str = "CORS_ORIGINS") -> list[str]:
    raw = os.getenv(origins_env, "*")
    if raw == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def validation_errors_by_field(exc: RequestValidationError) -> dict[str, str]:
    """Flatten pydantic errors into ``{"field.path": "message"}``, first message per field wins."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in err.get("loc", ()) if part not in _LOCATION_ROOTS)
        message = str(err.get("msg", "Invalid value")).removeprefix(_VALUE_ERROR_PREFIX)
        errors.setdefault(path or "__all__", message)
    return errors


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation failed", "errors": validation_errors_by_field(exc)},
    )


def create_service_app(
    *,
    title: str,
    version: str = "0.1.0",
    description: str | None = None,
    enable_metrics: bool = True,
    metrics_endpoint: str = "/metrics",
    enable_cors: bool = True,
    cors_allow_origins: Sequence[str] | None = None,
    enable_correlation_id: bool = True,
    correlation_header_name: str = "X-Request-ID",
    **fastapi_kwargs: Any,
) -> FastAPI:
    """Build a FastAPI app with the middleware stack every service shares.

    Request validation errors are rendered as ``{"detail", "errors"}`` with one
    message per dotted field path, the same body services use for their own
    field errors.
    """
    app = FastAPI(title=title, version=version, description=description, **fastapi_kwargs)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    if enable_metrics:
        Instrumentator().instrument(app).expose(app, endpoint=metrics_endpoint, include_in_schema=False)

    if enable_cors:
        origins = list(cors_allow_origins) if cors_allow_origins is not None else cors_origins_from_env()
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            # Browsers reject credentialed requests against a wildcard origin
            allow_credentials=origins != ["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if enable_correlation_id:
        app.add_middleware(
            CorrelationIdMiddleware,
            header_name=correlation_header_name,
            generator=lambda: uuid.uuid4().hex,
            update_request_header=True,
        )

    return app
