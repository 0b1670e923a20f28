"""Demo: walk a user through create → update → deactivate → delete.

Run with:
    python scripts/demo_user_lifecycle.py
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from user_domain.main import app


def main() -> None:
    client = TestClient(app)

    # ── Step 1: create alice ────────────────────────────────────────
    r = client.post("/users", json={"username": "alice", "email": "alice@x.com"})
    print(f"1. POST   /users             → {r.status_code}  {r.json()}")
    user_id = r.json()["id"]

    # ── Step 2: second alice is a conflict ──────────────────────────
    r = client.post("/users", json={"username": "alice", "email": "bob@x.com"})
    print(f"2. POST   /users (dupe)      → {r.status_code}  {r.json()['detail']}")

    # ── Step 3: change only the email ───────────────────────────────
    r = client.patch(f"/users/{user_id}", json={"email": "new@x.com"})
    print(f"3. PATCH  /users/{user_id}         → {r.status_code}  {r.json()}")

    # ── Step 4: deactivate ──────────────────────────────────────────
    r = client.post(f"/users/{user_id}/deactivate")
    print(f"4. POST   /users/{user_id}/deactivate → {r.status_code}")
    r = client.get(f"/users/{user_id}")
    print(f"   GET    /users/{user_id}         → active={r.json()['active']}")

    # ── Step 5: delete ──────────────────────────────────────────────
    r = client.delete(f"/users/{user_id}")
    print(f"5. DELETE /users/{user_id}         → {r.status_code}")
    r = client.get(f"/users/{user_id}")
    print(f"   GET    /users/{user_id}         → {r.status_code}  (gone)")


if __name__ == "__main__":
    main()
