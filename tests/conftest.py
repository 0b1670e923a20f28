from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

# Ensure repo root is on sys.path so `import user_domain` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from user_domain.api.dependencies import get_user_service  # noqa: E402
from user_domain.db.engine import Base, build_engine, build_session_factory  # noqa: E402
from user_domain.main import app  # noqa: E402
from user_domain.repos.sql_user_repo import SqlUserRepo  # noqa: E402
from user_domain.repos.user_repo import InMemoryUserRepo  # noqa: E402
from user_domain.services.users_service import UserService  # noqa: E402


@pytest.fixture
def memory_repo() -> InMemoryUserRepo:
    return InMemoryUserRepo()


@pytest.fixture
def sql_repo() -> Iterator[SqlUserRepo]:
    """SqlUserRepo over a fresh in-memory SQLite database."""
    import user_domain.db.tables  # noqa: F401

    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield SqlUserRepo(build_session_factory(engine))
    engine.dispose()


@pytest.fixture
def user_service(memory_repo: InMemoryUserRepo) -> UserService:
    return UserService(memory_repo)


@pytest.fixture
def client(user_service: UserService) -> Iterator[TestClient]:
    app.dependency_overrides[get_user_service] = lambda: user_service
    yield TestClient(app)
    app.dependency_overrides.clear()
