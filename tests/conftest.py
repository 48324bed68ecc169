# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory Supabase fake covering the query builder calls the services
#   make (table/select/eq/neq/in_/like/order/limit/insert/update/delete/execute)
#   and the storage bucket calls (from_/upload/get_public_url/remove)
# - Dict-backed Redis fake for the conversation store
# - Seeded subscription plans (free, starter, pro, enterprise)
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-1234")
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-gateway-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("FREE_GENERATION_LIMIT", "5")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import copy
import itertools
import re
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

import pytest

from lib.supabase_client import SupabaseClient


# =============================================================================
# In-Memory Supabase
# =============================================================================

_clock = itertools.count(1)


def _timestamp() -> str:
    """Strictly increasing ISO timestamps so created_at ordering is stable."""
    tick = next(_clock)
    return f"2025-01-01T00:{tick // 60 % 60:02d}:{tick % 60:02d}.{tick:06d}+00:00"


class FakeQuery:
    """One query builder chain on a FakeSupabase table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: list = []
        self.ordering: list[tuple[str, bool]] = []
        self.max_rows: int | None = None

    # Operations
    def select(self, columns: str = "*", **kwargs):
        self.operation = "select"
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, values: dict):
        self.operation = "update"
        self.payload = values
        return self

    def delete(self):
        self.operation = "delete"
        return self

    # Filters
    def eq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def like(self, column: str, pattern: str):
        regex = re.compile(
            "".join(".*" if char == "%" else "." if char == "_" else re.escape(char) for char in pattern),
            re.DOTALL,
        )
        self.filters.append(lambda row: isinstance(row.get(column), str) and regex.fullmatch(row[column]) is not None)
        return self

    def order(self, column: str, desc: bool = False):
        self.ordering.append((column, desc))
        return self

    def limit(self, count: int):
        self.max_rows = count
        return self

    # Execution
    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self.filters)

    def execute(self):
        self.db.calls.append((self.table_name, self.operation))
        if self.db.fail_tables.get(self.table_name):
            raise RuntimeError(f"table {self.table_name} unavailable")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.operation == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = {"id": str(uuid4()), "created_at": _timestamp(), **copy.deepcopy(item)}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return SimpleNamespace(data=inserted)

        matched = [row for row in rows if self._matches(row)]

        if self.operation == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=[copy.deepcopy(row) for row in matched])

        if self.operation == "delete":
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[copy.deepcopy(row) for row in matched])

        for column, desc in reversed(self.ordering):
            matched.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return SimpleNamespace(data=[copy.deepcopy(row) for row in matched])


class FakeBucket:
    """One storage bucket: objects are kept as {path: (bytes, file_options)}."""

    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    @property
    def objects(self) -> dict[str, tuple[bytes, dict]]:
        return self.storage.objects.setdefault(self.name, {})

    def upload(self, path: str, file: bytes, file_options: dict | None = None):
        options = file_options or {}
        if self.storage.fail_uploads:
            raise RuntimeError("storage unavailable")
        if path in self.objects and options.get("upsert") != "true":
            raise RuntimeError("The resource already exists")
        self.objects[path] = (file, options)
        return SimpleNamespace(path=path)

    def get_public_url(self, path: str) -> str:
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths: list[str]):
        for path in paths:
            self.objects.pop(path, None)
        return []


class FakeStorage:
    """Stands in for client.storage."""

    def __init__(self):
        self.objects: dict[str, dict[str, tuple[bytes, dict]]] = {}
        self.fail_uploads = False

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def list_buckets(self) -> list:
        return [SimpleNamespace(name=name) for name in self.objects]


class FakeSupabase:
    """Stands in for supabase.Client: tables are lists of dict rows."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables: dict[str, list[dict]] = tables or {}
        self.calls: list[tuple[str, str]] = []
        self.fail_tables: dict[str, bool] = {}
        self.storage = FakeStorage()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> list[dict]:
        return self.tables.get(name, [])


# =============================================================================
# In-Memory Redis
# =============================================================================

class FakeRedis:
    """The subset of redis.Redis used by ConversationStore and publish_event."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.expirations: dict[str, int | None] = {}
        self.published: list[tuple[str, str]] = []

    def set(self, key: str, value: str, ex: int | None = None):
        self.values[key] = value
        self.expirations[key] = ex
        return True

    def get(self, key: str):
        return self.values.get(key)

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.values.pop(key, None) is not None:
                removed += 1
            self.expirations.pop(key, None)
        return removed

    def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        return 0


# =============================================================================
# Fixtures
# =============================================================================

FREE_PLAN_ID = "11111111-1111-1111-1111-111111111111"
STARTER_PLAN_ID = "22222222-2222-2222-2222-222222222222"
PRO_PLAN_ID = "33333333-3333-3333-3333-333333333333"
ENTERPRISE_PLAN_ID = "44444444-4444-4444-4444-444444444444"


@pytest.fixture
def plans() -> list[dict]:
    """Subscription plans as stored in subscription_plans."""
    return [
        {
            "id": FREE_PLAN_ID, "name": "Gratuit", "slug": "free", "price_fcfa": 0,
            "price_usd": 0, "credits_per_month": 0, "max_resolution": "1K",
            "features": ["5 générations gratuites"], "is_active": True, "sort_order": 0,
        },
        {
            "id": STARTER_PLAN_ID, "name": "Starter", "slug": "starter", "price_fcfa": 5000,
            "price_usd": 8, "credits_per_month": 30, "max_resolution": "2K",
            "features": ["30 crédits", "2K"], "is_active": True, "sort_order": 1,
        },
        {
            "id": PRO_PLAN_ID, "name": "Pro", "slug": "pro", "price_fcfa": 15000,
            "price_usd": 25, "credits_per_month": 100, "max_resolution": "4K",
            "features": ["100 crédits", "4K"], "is_active": True, "sort_order": 2,
            "is_popular": True,
        },
        {
            "id": ENTERPRISE_PLAN_ID, "name": "Entreprise", "slug": "enterprise", "price_fcfa": 0,
            "price_usd": 0, "credits_per_month": 1000, "max_resolution": "4K",
            "features": ["Sur devis"], "is_active": True, "sort_order": 3,
        },
    ]


@pytest.fixture
def fake_db(monkeypatch, plans) -> FakeSupabase:
    """FakeSupabase installed as the SupabaseClient singleton, plans seeded."""
    db = FakeSupabase({"subscription_plans": copy.deepcopy(plans)})
    monkeypatch.setattr(SupabaseClient, "_instance", db)
    return db


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def user_id() -> str:
    return "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"


@pytest.fixture
def other_user_id() -> str:
    return "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"


def subscription_row(user_id: str, plan_id: str, **values) -> dict:
    """A user_subscriptions row with sensible defaults."""
    return {
        "id": str(uuid4()),
        "user_id": user_id,
        "plan_id": plan_id,
        "status": "active",
        "credits_remaining": 0,
        "free_generations_used": 0,
        "created_at": _timestamp(),
        **values,
    }


@pytest.fixture
def make_subscription(fake_db):
    """Insert a subscription row for a user: make_subscription(user_id, plan_id, credits_remaining=10)."""
    def factory(user_id: str, plan_id: str, **values) -> dict:
        row = subscription_row(user_id, plan_id, **values)
        fake_db.tables.setdefault("user_subscriptions", []).append(row)
        return row
    return factory
