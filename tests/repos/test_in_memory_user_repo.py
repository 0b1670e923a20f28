from __future__ import annotations

from user_domain.models.user import User
from user_domain.repos.user_repo import InMemoryUserRepo


def test_ids_start_at_one_and_increment() -> None:
    repo = InMemoryUserRepo()
    ids = [repo.save(User(username=n, email=f"{n}@x.com")).id for n in "abc"]
    assert ids == [1, 2, 3]


def test_ids_are_not_reused_after_delete() -> None:
    repo = InMemoryUserRepo()
    a = repo.save(User(username="a", email="a@x.com"))
    repo.delete_by_id(a.id)

    b = repo.save(User(username="b", email="b@x.com"))
    assert b.id == 2


def test_generated_id_skips_explicitly_stored_ids() -> None:
    repo = InMemoryUserRepo()
    repo.save(User(id=1, username="seeded", email="seeded@x.com"))

    fresh = repo.save(User(username="fresh", email="fresh@x.com"))
    assert fresh.id == 2


def test_find_all_returns_copy_not_internal_state() -> None:
    repo = InMemoryUserRepo()
    repo.save(User(username="a", email="a@x.com"))

    returned = repo.find_all()
    returned.clear()
    assert len(repo.find_all()) == 1
