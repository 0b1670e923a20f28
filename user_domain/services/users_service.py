from __future__ import annotations

import logging
from dataclasses import replace

from user_domain.models.user import UNSET, User, UserPatch
from user_domain.repos.user_repo import DuplicateUserError, UserRepo

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    pass


class UserValidationError(UserServiceError, ValueError):
    pass


class UserAlreadyExistsError(UserServiceError):
    pass


class UserNotFoundError(UserServiceError, LookupError):
    pass


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _require_valid_id(user_id: int | None) -> int:
    if user_id is None or user_id <= 0:
        raise UserValidationError("Invalid user ID")
    return user_id


class UserService:
    """Validation, uniqueness and lifecycle rules on top of a UserRepo.

    The service keeps no state besides the repo, so one instance can be
    shared between callers. Every failure is raised to the caller; no
    store write happens unless all checks pass.
    """

    def __init__(self, repo: UserRepo) -> None:
        self._repo = repo

    def create_user(self, user: User | None) -> User:
        if user is None:
            raise UserValidationError("User cannot be null")
        if _is_blank(user.username):
            raise UserValidationError("Username cannot be empty")
        if _is_blank(user.email):
            raise UserValidationError("Email cannot be empty")

        if self._repo.exists_by_username(user.username):
            logger.warning("Rejected duplicate username=%s", user.username)
            raise UserAlreadyExistsError(f"Username already exists: {user.username}")
        if self._repo.exists_by_email(user.email):
            logger.warning("Rejected duplicate email=%s", user.email)
            raise UserAlreadyExistsError(f"Email already exists: {user.email}")

        saved = self._save(replace(user, active=True))
        logger.info("Created user id=%s username=%s", saved.id, saved.username)
        return saved

    def get_user_by_id(self, user_id: int | None) -> User | None:
        return self._repo.find_by_id(_require_valid_id(user_id))

    def get_user_by_username(self, username: str | None) -> User | None:
        if _is_blank(username):
            raise UserValidationError("Username cannot be empty")
        return self._repo.find_by_username(username)

    def get_all_active_users(self) -> list[User]:
        return self._repo.find_active_users()

    def list_users(self) -> list[User]:
        return self._repo.find_all()

    def update_user(self, user_id: int | None, patch: UserPatch | User | None) -> User:
        _require_valid_id(user_id)
        if patch is None:
            raise UserValidationError("Updated user cannot be null")
        if isinstance(patch, User):
            patch = UserPatch.from_user(patch)

        existing = self._get_existing(user_id)
        updated = existing

        if patch.username is not UNSET and patch.username != existing.username:
            if _is_blank(patch.username):
                raise UserValidationError("Username cannot be empty")
            if self._repo.exists_by_username(patch.username):
                logger.warning("Rejected duplicate username=%s", patch.username)
                raise UserAlreadyExistsError(
                    f"Username already exists: {patch.username}"
                )
            updated = replace(updated, username=patch.username)

        if patch.email is not UNSET and patch.email != existing.email:
            if _is_blank(patch.email):
                raise UserValidationError("Email cannot be empty")
            if self._repo.exists_by_email(patch.email):
                logger.warning("Rejected duplicate email=%s", patch.email)
                raise UserAlreadyExistsError(f"Email already exists: {patch.email}")
            updated = replace(updated, email=patch.email)

        saved = self._save(updated)
        logger.info("Updated user id=%s", saved.id)
        return saved

    def deactivate_user(self, user_id: int | None) -> None:
        _require_valid_id(user_id)
        user = self._get_existing(user_id)
        self._save(replace(user, active=False))
        logger.info("Deactivated user id=%s", user_id)

    def delete_user(self, user_id: int | None) -> None:
        _require_valid_id(user_id)
        self._get_existing(user_id)
        self._repo.delete_by_id(user_id)
        logger.info("Deleted user id=%s", user_id)

    def _get_existing(self, user_id: int) -> User:
        user = self._repo.find_by_id(user_id)
        if user is None:
            logger.warning("User not found id=%s", user_id)
            raise UserNotFoundError(f"User not found with id: {user_id}")
        return user

    def _save(self, user: User) -> User:
        # The store's unique index has the final say when a concurrent
        # write slipped in after the exists_by_* probes.
        try:
            return self._repo.save(user)
        except DuplicateUserError as e:
            logger.warning("Store rejected duplicate %s=%s", e.field.lower(), e.value)
            raise UserAlreadyExistsError(str(e)) from e
