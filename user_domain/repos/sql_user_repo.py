"""SQLAlchemy implementation of UserRepo."""

from __future__ import annotations

import re

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from user_domain.db.tables import UserRow
from user_domain.models.user import User
from user_domain.repos.user_repo import DuplicateUserError

# Signed 64-bit INTEGER primary key.
_MAX_ID = 2**63 - 1

# Matches only the constraint part of the message, never the offending value.
_USERNAME_VIOLATION = re.compile(
    r'constraint failed: users\.username\b|"ix_users_username"|Key \(username\)='
)


class SqlUserRepo:
    """Satisfies the UserRepo Protocol using a relational table.

    Every call runs in its own transaction, so a call either returns a
    result or leaves the table untouched.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def save(self, user: User) -> User:
        try:
            with self._session_factory.begin() as session:
                if user.id is not None and not _in_range(user.id):
                    raise ValueError(f"user id out of range: {user.id}")
                row = None if user.id is None else session.get(UserRow, user.id)
                if row is None:
                    row = UserRow(id=user.id)
                    session.add(row)
                row.username = user.username
                row.email = user.email
                row.active = user.active
                session.flush()
                return _row_to_user(row)
        except IntegrityError as e:
            raise _duplicate_from(e, user) from None

    def find_by_id(self, user_id: int) -> User | None:
        if not _in_range(user_id):
            return None
        with self._session_factory() as session:
            row = session.get(UserRow, user_id)
            return None if row is None else _row_to_user(row)

    def find_by_username(self, username: str) -> User | None:
        with self._session_factory() as session:
            stmt = select(UserRow).where(UserRow.username == username)
            row = session.execute(stmt).scalar_one_or_none()
            return None if row is None else _row_to_user(row)

    def find_all(self) -> list[User]:
        with self._session_factory() as session:
            rows = session.execute(select(UserRow).order_by(UserRow.id)).scalars()
            return [_row_to_user(r) for r in rows]

    def find_active_users(self) -> list[User]:
        with self._session_factory() as session:
            stmt = select(UserRow).where(UserRow.active.is_(True)).order_by(UserRow.id)
            return [_row_to_user(r) for r in session.execute(stmt).scalars()]

    def delete_by_id(self, user_id: int) -> None:
        if not _in_range(user_id):
            return
        with self._session_factory.begin() as session:
            session.execute(delete(UserRow).where(UserRow.id == user_id))

    def exists_by_username(self, username: str) -> bool:
        with self._session_factory() as session:
            stmt = select(exists().where(UserRow.username == username))
            return bool(session.execute(stmt).scalar())

    def exists_by_email(self, email: str) -> bool:
        with self._session_factory() as session:
            stmt = select(exists().where(UserRow.email == email))
            return bool(session.execute(stmt).scalar())


def _in_range(user_id: int) -> bool:
    return -_MAX_ID - 1 <= user_id <= _MAX_ID


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        active=row.active,
    )


def _duplicate_from(exc: IntegrityError, user: User) -> DuplicateUserError:
    if _USERNAME_VIOLATION.search(str(exc.orig)):
        return DuplicateUserError("Username", user.username)
    return DuplicateUserError("Email", user.email)
