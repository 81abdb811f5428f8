import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.ai_client import get_ai_client
from app.core.limiter import limiter
from app.database.supabase_client import get_optional_supabase, get_supabase
from app.main import app
from app.modules.auth.service import token_cache
from app.modules.billing.event_store import clear_cache


class FakeResponse:
    def __init__(self, data):
        self.data = data


def _coerce(value: str):
    if value == "true":
        return True
    if value == "false":
        return False
    if value == "null":
        return None
    return value


class FakeQuery:
    """Chainable stand-in for a postgrest request builder over in-memory rows."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.ignore_duplicates = False
        self.filters: List[Callable[[dict], bool]] = []
        self.order_by: Optional[tuple] = None
        self.row_limit: Optional[int] = None
        self.maybe_one = False

    @property
    def rows(self) -> List[dict]:
        return self.db.tables.setdefault(self.table_name, [])

    def select(self, columns: str = "*"):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict: str = "id", ignore_duplicates: bool = False):
        self.operation = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def lt(self, column: str, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) < value)
        return self

    def in_(self, column: str, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def or_(self, expression: str):
        clauses = []
        for clause in expression.split(","):
            column, op, value = clause.split(".", 2)
            assert op == "eq", f"unsupported or_ operator {op}"
            clauses.append((column, _coerce(value)))
        self.filters.append(lambda row: any(row.get(c) == v for c, v in clauses))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    def maybe_single(self):
        self.maybe_one = True
        return self

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self.columns.split(",")}

    def _new_row(self, values: dict) -> dict:
        row = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
        row.update(values)
        self.rows.append(row)
        return row

    def execute(self):
        error = self.db.errors.get(self.table_name)
        if error is not None:
            raise error

        if self.operation == "select":
            found = [self._project(r) for r in self.rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                found.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
            if self.row_limit is not None:
                found = found[:self.row_limit]
            if self.maybe_one:
                # postgrest-py returns no response object when maybe_single finds nothing
                return FakeResponse(found[0]) if found else None
            return FakeResponse(found)

        if self.operation == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            return FakeResponse([dict(self._new_row(dict(p))) for p in payload])

        if self.operation == "upsert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
            written = []
            for values in payload:
                existing = next(
                    (r for r in self.rows if all(r.get(k) == values.get(k) for k in keys)),
                    None,
                )
                if existing is None:
                    written.append(dict(self._new_row(dict(values))))
                elif not self.ignore_duplicates:
                    existing.update(values)
                    written.append(dict(existing))
            return FakeResponse(written)

        if self.operation == "update":
            updated = []
            for row in self.rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.operation == "delete":
            removed = [r for r in self.rows if self._matches(r)]
            self.db.tables[self.table_name] = [r for r in self.rows if not self._matches(r)]
            return FakeResponse([dict(r) for r in removed])

        raise AssertionError(f"unsupported operation {self.operation}")


class FakeBucket:
    def __init__(self, name: str, files: Dict[str, dict]):
        self.name = name
        self.files = files

    def upload(self, path: str, content: bytes, file_options: Optional[dict] = None):
        self.files[path] = {"content": content, "options": file_options or {}}
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path: str) -> str:
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def create_signed_url(self, path: str, expires_in: int) -> dict:
        if path not in self.files:
            raise Exception("Object not found")
        return {"signedURL": f"https://example.supabase.co/storage/v1/object/sign/{self.name}/{path}?token=t"}

    def remove(self, paths: List[str]):
        for path in paths:
            self.files.pop(path, None)
        return []

    def list(self, prefix: str = ""):
        entries, folders = [], set()
        for path, stored in self.files.items():
            if not path.startswith(f"{prefix}/"):
                continue
            name = path[len(prefix) + 1:]
            if "/" in name:
                folder = name.split("/", 1)[0]
                if folder not in folders:
                    folders.add(folder)
                    entries.append({"name": folder, "metadata": None})
            else:
                entries.append({"name": name, "metadata": {"size": len(stored["content"])}})
        return entries


class FakeStorage:
    def __init__(self):
        self.buckets: Dict[str, Dict[str, dict]] = {}

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(bucket, self.buckets.setdefault(bucket, {}))


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.errors: Dict[str, Exception] = {}
        self.storage = FakeStorage()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture(autouse=True)
def reset_state():
    limiter.enabled = False
    clear_cache()
    token_cache.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_optional_supabase] = lambda: fake_supabase
    return TestClient(app)


@pytest.fixture
def mock_ai():
    ai = MagicMock()
    app.dependency_overrides[get_ai_client] = lambda: ai
    return ai


@pytest.fixture
def user_headers():
    return {"x-user-id": "8d3c5a51-4b1e-4f0a-9a57-1f7c2b6e9d10"}


@pytest.fixture
def other_headers():
    return {"x-user-id": "0f5b2f57-9d7a-4c2e-8f3b-6a1d2c4e8b90"}
