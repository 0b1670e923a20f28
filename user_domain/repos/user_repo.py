from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from typing import Protocol

from user_domain.models.user import User


class DuplicateUserError(Exception):
    """Raised by a store when a write would break a unique index."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} already exists: {value}")
        self.field = field
        self.value = value


class UserRepo(Protocol):
    def save(self, user: User) -> User: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_username(self, username: str) -> User | None: ...
    def find_all(self) -> list[User]: ...
    def find_active_users(self) -> list[User]: ...
    def delete_by_id(self, user_id: int) -> None: ...
    def exists_by_username(self, username: str) -> bool: ...
    def exists_by_email(self, email: str) -> bool: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._by_id: dict[int, User] = {}
        self._by_username: dict[str, int] = {}
        self._by_email: dict[str, int] = {}

    def save(self, user: User) -> User:
        with self._lock:
            # Unique indexes are checked under the same lock as the write,
            # so two racing saves cannot both claim a username or email.
            owner = self._by_username.get(user.username)
            if owner is not None and owner != user.id:
                raise DuplicateUserError("Username", user.username)
            owner = self._by_email.get(user.email)
            if owner is not None and owner != user.id:
                raise DuplicateUserError("Email", user.email)

            if user.id is None:
                new_id = next(self._ids)
                while new_id in self._by_id:
                    new_id = next(self._ids)
                user = replace(user, id=new_id)
            else:
                previous = self._by_id.get(user.id)
                if previous is not None:
                    del self._by_username[previous.username]
                    del self._by_email[previous.email]

            self._by_id[user.id] = user
            self._by_username[user.username] = user.id
            self._by_email[user.email] = user.id
            return user

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            return self._by_id.get(user_id)

    def find_by_username(self, username: str) -> User | None:
        with self._lock:
            user_id = self._by_username.get(username)
            return None if user_id is None else self._by_id[user_id]

    def find_all(self) -> list[User]:
        with self._lock:
            return list(self._by_id.values())

    def find_active_users(self) -> list[User]:
        with self._lock:
            return [u for u in self._by_id.values() if u.active]

    def delete_by_id(self, user_id: int) -> None:
        with self._lock:
            u = self._by_id.pop(user_id, None)
            if u is None:
                return
            del self._by_username[u.username]
            del self._by_email[u.email]

    def exists_by_username(self, username: str) -> bool:
        with self._lock:
            return username in self._by_username

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return email in self._by_email
