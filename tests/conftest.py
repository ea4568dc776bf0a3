from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import httpx
import pytest

from knowtrack.config import Settings
from knowtrack.db.store import StoreClient

STORE_URL = "https://store.test"


class FakeStore:
    """In-memory stand-in for the hosted REST store, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {"papers": [], "words": []}
        self.calls: List[tuple] = []
        self.next_id = 1
        self.clock = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        self.fail_next: Dict[str, tuple] = {}
        self.garbage_next: Dict[str, str] = {}
        self.require_auth = False
        self.tokens = {"reader@example.com": ("s3cret", "token-abc")}

    def _now(self) -> str:
        self.clock += timedelta(seconds=1)
        return self.clock.isoformat()

    def seed(self, table: str, **row: Any) -> Dict[str, Any]:
        row.setdefault("id", self.next_id)
        self.next_id = max(self.next_id, row["id"]) + 1
        row.setdefault("created_at", self._now())
        row.setdefault("updated_at", row["created_at"])
        self.tables[table].append(row)
        return row

    def fail(self, method: str, status: int = 500, message: str = "boom") -> None:
        self.fail_next[method] = (status, message)

    def garble(self, method: str, body: str = "<html>maintenance</html>") -> None:
        self.garbage_next[method] = body

    def writes(self, method: str | None = None) -> List[tuple]:
        return [c for c in self.calls if c[0] != "GET" and (method is None or c[0] == method)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path, dict(request.url.params)))
        if method in self.fail_next:
            status, message = self.fail_next.pop(method)
            return httpx.Response(status, json={"message": message})
        if method in self.garbage_next:
            return httpx.Response(200, text=self.garbage_next.pop(method))

        if path == "/auth/v1/token":
            body = json.loads(request.content)
            known = self.tokens.get(body["email"])
            if not known or known[0] != body["password"]:
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            return httpx.Response(200, json={"access_token": known[1], "user": {"email": body["email"]}})
        if path == "/auth/v1/logout":
            return httpx.Response(204)

        table = path.rsplit("/", 1)[-1]
        rows = self.tables[table]
        if method != "GET" and self.require_auth:
            if request.headers.get("authorization") == "Bearer anon-key":
                return httpx.Response(401, json={"message": "new row violates row-level security policy"})

        if method == "GET":
            ordered = sorted(rows, key=lambda r: r["created_at"] or "", reverse=True)
            return httpx.Response(200, json=ordered)
        if method == "POST":
            created = []
            for row in json.loads(request.content):
                created.append(self.seed(table, **row))
            return httpx.Response(201, json=created)

        row_id = int(request.url.params["id"].removeprefix("eq."))
        if method == "PATCH":
            for r in rows:
                if r["id"] == row_id:
                    r.update(json.loads(request.content))
                    if table == "papers":
                        r["updated_at"] = self._now()
            return httpx.Response(204)
        if method == "DELETE":
            self.tables[table] = [r for r in rows if r["id"] != row_id]
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def settings() -> Settings:
    return Settings(STORE_URL=STORE_URL, STORE_KEY="anon-key")


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def store(settings: Settings, fake_store: FakeStore):
    client = StoreClient(settings, transport=httpx.MockTransport(fake_store.handler))
    yield client
    client.close()
