from __future__ import annotations

import copy
from typing import Any, Optional

import pytest

from config import AppConfig
from data.cache import QueryCache
from data.connection import UNIQUE_VIOLATION, ConnectionStatus, RemoteStoreError
from data.local_store import EngagementStore
from data.service import build_services


_RESERVED = {"select", "order", "limit", "offset"}


def make_config(configured: bool = True, **overrides: Any) -> AppConfig:
    values = dict(
        supabase_url="https://demo.supabase.co" if configured else None,
        supabase_anon_key="anon-key" if configured else None,
        cache_max_age=60.0,
        page_size=6,
        request_timeout=5.0,
        local_state_dir=".blog_state",
        covers_bucket="covers",
        site_name="Notebook",
        log_level="INFO",
    )
    values.update(overrides)
    return AppConfig(**values)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _as_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _matches(row: dict[str, Any], params: dict[str, Any]) -> bool:
    for key, cond in params.items():
        if key in _RESERVED:
            continue
        op, _, expected = str(cond).partition(".")
        actual = _as_param(row.get(key))
        if op == "eq" and actual != expected:
            return False
        if op == "neq" and actual == expected:
            return False
    return True


class FakeRestClient:
    """
    In-memory stand-in for RestClient: same methods, PostgREST-style params,
    the likes trigger and the track_post_view RPC emulated.
    """

    def __init__(self, categories=None, posts=None, likes=None):
        self.tables: dict[str, list[dict[str, Any]]] = {
            "categories": copy.deepcopy(categories or []),
            "posts": copy.deepcopy(posts or []),
            "likes": copy.deepcopy(likes or []),
            "post_views": [],
        }
        self.calls: list[tuple[str, str]] = []
        self.fail: set[Any] = set()
        self.closed = False

    def _check(self, op: str, table: str) -> None:
        self.calls.append((op, table))
        if op in self.fail or (op, table) in self.fail:
            raise RemoteStoreError(f"{op} {table} failed", status=500)

    def calls_for(self, op: str, table: Optional[str] = None) -> int:
        return sum(1 for o, t in self.calls if o == op and (table is None or t == table))

    def is_configured(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True

    def _rows(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        return [r for r in self.tables[table] if _matches(r, params)]

    def select(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        self._check("select", table)
        rows = [dict(r) for r in self._rows(table, params)]
        order = params.get("order")
        if order:
            col, _, direction = order.partition(".")
            present = [r for r in rows if r.get(col) is not None]
            missing = [r for r in rows if r.get(col) is None]
            present.sort(key=lambda r: r[col], reverse=direction == "desc")
            rows = present + missing
        offset = int(params.get("offset", 0))
        limit = params.get("limit")
        rows = rows[offset : offset + int(limit)] if limit is not None else rows[offset:]
        if "categories(*)" in params.get("select", ""):
            by_id = {c["id"]: c for c in self.tables["categories"]}
            for r in rows:
                r["categories"] = by_id.get(r.get("category_id"))
        return rows

    def count(self, table: str, params: dict[str, Any]) -> int:
        self._check("count", table)
        return len(self._rows(table, params))

    def _bump(self, post_id: str, column: str, delta: int) -> int:
        for post in self.tables["posts"]:
            if post["id"] == post_id:
                post[column] = (post.get(column) or 0) + delta
                return post[column]
        return 0

    def insert(self, table: str, rows: list[dict[str, Any]]) -> None:
        self._check("insert", table)
        for row in rows:
            if table == "likes":
                if self._rows("likes", {"post_id": f"eq.{row['post_id']}", "user_id": f"eq.{row['user_id']}"}):
                    raise RemoteStoreError("duplicate key", status=409, code=UNIQUE_VIOLATION)
                self._bump(row["post_id"], "likes", 1)
            self.tables[table].append(dict(row))

    def delete(self, table: str, params: dict[str, Any]) -> None:
        self._check("delete", table)
        doomed = self._rows(table, params)
        for row in doomed:
            if table == "likes":
                self._bump(row["post_id"], "likes", -1)
        self.tables[table] = [r for r in self.tables[table] if r not in doomed]

    def update(self, table: str, values: dict[str, Any], params: dict[str, Any]) -> list[dict[str, Any]]:
        self._check("update", table)
        rows = self._rows(table, params)
        for row in rows:
            row.update(values)
        return [dict(r) for r in rows]

    def rpc(self, function: str, args: dict[str, Any]) -> Any:
        self._check("rpc", function)
        if function != "track_post_view":
            raise RemoteStoreError(f"unknown function {function}", status=404)
        key = {"post_id": args["post_id"], "user_id": args["user_id"]}
        if key not in self.tables["post_views"]:
            self.tables["post_views"].append(key)
            return self._bump(args["post_id"], "views", 1)
        return next(p["views"] for p in self.tables["posts"] if p["id"] == args["post_id"])

    def ping(self) -> ConnectionStatus:
        try:
            self.select("categories", {"select": "id", "limit": 1})
        except RemoteStoreError as e:
            return ConnectionStatus(connected=False, error=str(e))
        return ConnectionStatus(connected=True)


CATEGORY_ROWS = [
    {"id": "c-tech", "name": "Technology", "slug": "technology", "created_at": "2024-01-01T00:00:00Z"},
    {"id": "c-art", "name": "Art", "slug": "art", "created_at": "2024-01-01T00:00:00Z"},
    {"id": "c-empty", "name": "Empty", "slug": "empty", "created_at": "2024-01-01T00:00:00Z"},
]


def _post(n: int, category_id: Optional[str], published: bool = True, day: Optional[int] = None) -> dict[str, Any]:
    day = day if day is not None else n
    return {
        "id": f"p{n}",
        "title": f"Post {n}",
        "slug": f"post-{n}",
        "excerpt": f"Excerpt {n}",
        "content": f"# Post {n}\n\nBody.",
        "cover_path": None,
        "category_id": category_id,
        "published": published,
        "published_at": f"2024-09-{day:02d}T12:00:00Z" if published else None,
        "views": 10 * n,
        "likes": n,
        "created_at": f"2024-09-{day:02d}T12:00:00Z",
        "updated_at": f"2024-09-{day:02d}T12:00:00Z",
    }


POST_ROWS = [
    _post(1, "c-tech"),
    _post(2, "c-art"),
    _post(3, "c-tech"),
    _post(4, "c-tech"),
    _post(5, "c-art"),
    _post(6, "c-tech", published=False),
    _post(7, None),
]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock):
    c = QueryCache(clock=clock)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def client() -> FakeRestClient:
    return FakeRestClient(categories=CATEGORY_ROWS, posts=POST_ROWS)


@pytest.fixture
def store() -> EngagementStore:
    return EngagementStore(session={}, persistent={})


@pytest.fixture
def cfg() -> AppConfig:
    return make_config(configured=True)


@pytest.fixture
def offline_cfg() -> AppConfig:
    return make_config(configured=False)


@pytest.fixture
def services(cfg, store, cache, client):
    s = build_services(cfg, store, cache=cache, client=client)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def offline_services(offline_cfg, store, cache, client):
    s = build_services(offline_cfg, store, cache=cache, client=client)
    try:
        yield s
    finally:
        s.close()
