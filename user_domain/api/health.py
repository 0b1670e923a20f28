"""Health and readiness endpoints.

  /health (liveness): the process is up and can answer.
  /ready (readiness): this instance can take traffic right now. With a
    database configured, that means the database answers a trivial query.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from user_domain.db import engine as db_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _database_check() -> str:
    if db_engine.engine is None:
        return "not_configured"
    try:
        with db_engine.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return "degraded"
    return "ok"


@router.get("/health")
def health() -> dict:
    """Liveness probe plus dependency status.

    Returns 200 even when degraded; the status field carries the outcome.
    """
    checks = {"database": _database_check()}
    overall = "degraded" if "degraded" in checks.values() else "ok"
    return {"status": overall, "checks": checks}


@router.get("/ready")
def ready() -> Response:
    if _database_check() == "degraded":
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_200_OK)
