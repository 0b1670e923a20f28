from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from user_domain.db import engine as db_engine
from user_domain.db.engine import build_engine


def test_health_returns_ok(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    # In tests no DATABASE_URL is configured
    assert data["checks"]["database"] == "not_configured"


def test_ready_returns_200(client: TestClient) -> None:
    resp = client.get("/ready")
    assert resp.status_code == 200


def test_ready_returns_200_when_database_answers(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(db_engine, "engine", build_engine("sqlite://"))

    assert client.get("/ready").status_code == 200
    assert client.get("/health").json()["checks"]["database"] == "ok"


def test_unreachable_database_degrades_health_and_fails_ready(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    unreachable = create_engine("sqlite:////nonexistent-dir/users.db")
    monkeypatch.setattr(db_engine, "engine", unreachable)

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json() == {"status": "degraded", "checks": {"database": "degraded"}}
    assert client.get("/ready").status_code == 503
