from __future__ import annotations

import sys
from pathlib import Path

# Allow running as: python scripts/store_smoketest.py
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from fastapi.testclient import TestClient

from app.main import app


def main() -> int:
    c = TestClient(app)

    r = c.delete("/user")
    print("DELETE /user", r.status_code)

    r = c.post("/user", json={"username": "smoke", "email": "smoke@example.com", "name": "Smoke"})
    print("POST /user", r.status_code, r.json())
    if r.status_code != 201:
        return 1
    user = r.json()

    r = c.post("/user", json={"username": "smoke", "email": "other@example.com"})
    print("POST /user (duplicate)", r.status_code, r.json())

    user["name"] = "Smoke v1"
    r = c.put(f"/user/{user['id']}", json=user)
    print("PUT /user/{id}", r.status_code, r.json())

    r = c.put(f"/user/{user['id']}", json=user)
    print("PUT /user/{id} (stale)", r.status_code, r.json())

    r = c.get("/user/count")
    print("/user/count", r.status_code, r.json())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
