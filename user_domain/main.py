from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from user_domain.api.health import router as health_router
from user_domain.api.users import router as users_router
from user_domain.core.config import SETTINGS
from user_domain.core.logging import setup_logging
from user_domain.db.engine import lifespan_db
from user_domain.middleware.request_context import RequestContextMiddleware

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    with lifespan_db():
        yield


app = FastAPI(
    title="user-domain-service",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health_router)
app.include_router(users_router)

logger.info(
    "user-domain-service started  env=%s log_level=%s port=%d store=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "sql" if SETTINGS.uses_database else "memory",
)
