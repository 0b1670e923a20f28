from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class User:
    username: str
    email: str
    active: bool = True
    id: int | None = None  # assigned by the store on first save

    @staticmethod
    def new(*, username: str, email: str) -> User:
        return User(username=username, email=email, active=True)


class _Unset(enum.Enum):
    UNSET = enum.auto()

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset.UNSET


@dataclass(frozen=True, slots=True)
class UserPatch:
    """Partial update for a User.

    A field left as UNSET is omitted and never overwrites the stored value.
    None (or a blank string) means the caller explicitly cleared the field,
    which the service rejects because username and email are required.
    """

    username: str | None | _Unset = UNSET
    email: str | None | _Unset = UNSET

    @staticmethod
    def from_user(user: User) -> UserPatch:
        # A User used as a patch supplies only its non-None fields.
        return UserPatch(
            username=UNSET if user.username is None else user.username,
            email=UNSET if user.email is None else user.email,
        )
