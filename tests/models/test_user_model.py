from __future__ import annotations

import pytest

from user_domain.models.user import UNSET, User, UserPatch


def test_user_new_starts_active_without_id() -> None:
    user = User.new(username="alice", email="alice@x.com")
    assert user.active is True
    assert user.id is None


def test_user_dataclass_is_frozen() -> None:
    user = User(id=1, username="alice", email="alice@x.com")
    with pytest.raises(AttributeError):
        user.email = "mutated@x.com"  # type: ignore[misc]


def test_patch_defaults_to_unset() -> None:
    patch = UserPatch()
    assert patch.username is UNSET
    assert patch.email is UNSET


def test_patch_keeps_explicit_none_distinct_from_unset() -> None:
    patch = UserPatch(email=None)
    assert patch.email is None
    assert patch.email is not UNSET
    assert patch.username is UNSET


def test_patch_from_user_treats_none_fields_as_omitted() -> None:
    source = User(username=None, email="e@x.com")  # type: ignore[arg-type]
    patch = UserPatch.from_user(source)
    assert patch.username is UNSET
    assert patch.email == "e@x.com"


def test_unset_repr() -> None:
    assert repr(UNSET) == "UNSET"
