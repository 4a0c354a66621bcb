"""structlog setup shared by the services.

Every event carries ``service``, ``env`` and, inside a request, the
``correlation_id`` assigned by the correlation middleware. Sentry is only
initialised when ``SENTRY_DSN`` is set.
"""

import logging
import os
import sys

import sentry_sdk
import structlog
from asgi_correlation_id.context import correlation_id
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog.contextvars import merge_contextvars

CONSOLE_ENVIRONMENTS = frozenset({"local", "dev", "test"})


class ServiceContext:
    """Processor stamping service identity and the request correlation id."""

    def __init__(self, service_name: str, app_env: str):
        self.service_name = service_name
        self.app_env = app_env

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("service", self.service_name)
        event_dict.setdefault("env", self.app_env)
        cid = correlation_id.get(None)
        if cid is not None:
            event_dict["correlation_id"] = cid
            if sentry_sdk.is_initialized():
                sentry_sdk.set_tag("correlation_id", cid)
        return event_dict


def _init_sentry(service_name: str, app_env: str) -> None:
    sentry_sdk.init(
        dsn=os.environ["SENTRY_DSN"],
        environment=app_env,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", service_name)


def _resolve_level() -> int:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(default_service_name: str) -> None:
    service_name = os.getenv("SERVICE_NAME", default_service_name)
    app_env = os.getenv("APP_ENV", "local")
    level = _resolve_level()

    if os.getenv("SENTRY_DSN"):
        _init_sentry(service_name, app_env)

    if app_env in CONSOLE_ENVIRONMENTS:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    structlog.configure(
        processors=[
            merge_contextvars,
            ServiceContext(service_name, app_env),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
