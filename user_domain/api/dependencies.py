from __future__ import annotations

import logging

from user_domain.db.engine import session_factory
from user_domain.repos.sql_user_repo import SqlUserRepo
from user_domain.repos.user_repo import InMemoryUserRepo, UserRepo
from user_domain.services.users_service import UserService

logger = logging.getLogger(__name__)


def _build_user_repo() -> UserRepo:
    if session_factory is None:
        return InMemoryUserRepo()
    return SqlUserRepo(session_factory)


# One process-wide store and service; the service holds no request state.
user_repo: UserRepo = _build_user_repo()
user_service = UserService(user_repo)


def get_user_service() -> UserService:
    """FastAPI dependency returning the shared UserService.

    Tests swap it out through app.dependency_overrides.
    """
    return user_service
