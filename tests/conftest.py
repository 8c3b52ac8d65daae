import os

# Settings are read from the environment when harvest_hub.main is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-harvest-hub")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")

import itertools
import uuid
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient

from harvest_hub.main import create_application
from harvest_hub.shared.config.settings import Settings
from harvest_hub.shared.core.exceptions import StorageError
from harvest_hub.shared.infrastructure.database.client import (
    UNIQUE_VIOLATION,
    DataClient,
    Filter,
    QueryFailure,
    QueryResult,
    QuerySuccess,
    Row,
)
from harvest_hub.shared.infrastructure.storage.supabase_storage import MediaStore, PreparedImage

# Embedded relation name -> (table, foreign key column on the parent row)
EMBEDDED_RELATIONS = {"gardens": ("gardens", "garden_id")}
UNIQUE_COLUMNS = {"users": ("email",)}


def _split_columns(columns: str) -> List[str]:
    """Split a PostgREST column list on top-level commas."""
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


class InMemoryDataClient(DataClient):
    """
    DataClient over Python lists with PostgREST-like semantics: eq/neq
    filters, ordering, limits, column projection with embedded relations,
    unique email enforcement and affected-row returns.
    """

    def __init__(self):
        self.tables: Dict[str, List[Row]] = {"users": [], "gardens": [], "crops": []}
        self.failures: Dict[Tuple[str, str], QueryFailure] = {}
        self.calls: List[Tuple[str, str]] = []
        self._sequence = itertools.count()
        self._inserted_at: Dict[str, int] = {}

    # Test helpers

    def fail(self, table: str, operation: str, message: str = "boom", code: Optional[str] = None):
        self.failures[(table, operation)] = QueryFailure(message, code, table, operation)

    def seed(self, table: str, **values) -> Row:
        row = dict(values)
        row.setdefault("id", str(uuid.uuid4()))
        self.tables[table].append(row)
        self._inserted_at[str(row["id"])] = next(self._sequence)
        return row

    def rows(self, table: str, **criteria) -> List[Row]:
        return [
            row for row in self.tables[table]
            if all(str(row.get(key)) == str(value) for key, value in criteria.items())
        ]

    # Internals

    @staticmethod
    def _matches(row: Mapping[str, Any], filters: Sequence[Filter]) -> bool:
        for item in filters:
            equal = str(row.get(item.column)) == str(item.value)
            if item.op == "eq" and not equal:
                return False
            if item.op == "neq" and equal:
                return False
        return True

    def _project(self, row: Row, columns: str) -> Row:
        result: Row = {}
        for column in _split_columns(columns):
            if column == "*":
                result.update(deepcopy(row))
            elif "(" in column:
                relation, inner = column.split("(", 1)
                relation = relation.strip()
                table, foreign_key = EMBEDDED_RELATIONS[relation]
                parent = next(
                    (r for r in self.tables[table] if str(r.get("id")) == str(row.get(foreign_key))),
                    None,
                )
                result[relation] = self._project(parent, inner.rstrip(")")) if parent else None
            else:
                result[column] = deepcopy(row.get(column))
        return result

    def _failure(self, table: str, operation: str) -> Optional[QueryFailure]:
        self.calls.append((table, operation))
        return self.failures.get((table, operation))

    # DataClient

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> QueryResult:
        failure = self._failure(table, "select")
        if failure:
            return failure

        rows = [row for row in self.tables[table] if self._matches(row, filters)]
        if order_by:
            rows.sort(
                key=lambda r: (str(r.get(order_by) or ""), self._inserted_at.get(str(r.get("id")), 0)),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return QuerySuccess(rows=[self._project(row, columns) for row in rows])

    async def insert(self, table: str, values: Mapping[str, Any]) -> QueryResult:
        failure = self._failure(table, "insert")
        if failure:
            return failure

        for column in UNIQUE_COLUMNS.get(table, ()):
            if any(row.get(column) == values.get(column) for row in self.tables[table]):
                return QueryFailure(
                    f'duplicate key value violates unique constraint "{table}_{column}_key"',
                    UNIQUE_VIOLATION,
                    table,
                    "insert",
                )

        row = self.seed(table, **deepcopy(dict(values)))
        return QuerySuccess(rows=[deepcopy(row)])

    async def update(self, table: str, values: Mapping[str, Any], filters: Sequence[Filter]) -> QueryResult:
        failure = self._failure(table, "update")
        if failure:
            return failure

        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(deepcopy(dict(values)))
                updated.append(deepcopy(row))
        return QuerySuccess(rows=updated)

    async def delete(self, table: str, filters: Sequence[Filter]) -> QueryResult:
        failure = self._failure(table, "delete")
        if failure:
            return failure

        removed = [row for row in self.tables[table] if self._matches(row, filters)]
        self.tables[table] = [row for row in self.tables[table] if not self._matches(row, filters)]
        return QuerySuccess(rows=removed)


class FakeMediaStore(MediaStore):
    """MediaStore that records uploads and deletions."""

    base_url = "https://test-project.supabase.co/storage/v1/object/public/harvest-hub"

    def __init__(self):
        self.uploads: List[Tuple[PreparedImage, str]] = []
        self.destroyed: List[Tuple[str, str]] = []
        self.fail_upload = False
        self.fail_destroy = False

    async def upload(self, image: PreparedImage, folder: str) -> str:
        if self.fail_upload:
            raise StorageError("Failed to upload image", operation="upload")
        self.uploads.append((image, folder))
        return f"{self.base_url}/{folder}/image-{len(self.uploads)}.{image.extension}"

    async def destroy(self, public_id: str, folder: str) -> None:
        if self.fail_destroy:
            raise StorageError("Failed to delete image", operation="destroy")
        self.destroyed.append((public_id, folder))


def make_settings(**overrides) -> Settings:
    values = {
        "ENVIRONMENT": "test",
        "SUPABASE_URL": "https://test-project.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "test-service-role-key",
        "JWT_SECRET_KEY": "test-secret-key-for-harvest-hub",
        "RATE_LIMIT_ENABLED": False,
        "BCRYPT_ROUNDS": 4,
        "LOG_FORMAT": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def data_client() -> InMemoryDataClient:
    return InMemoryDataClient()


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def app(settings, data_client, media_store):
    return create_application(settings=settings, data_client=data_client, media_store=media_store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user and return (token, user)."""

    def _register(
        email: str = "gardener@example.com",
        password: str = "tomatoes-4-all",
        name: str = "Sam Gardener",
        **extra,
    ):
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name, **extra},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def auth_headers(register):
    token, _ = register()
    return {"Authorization": f"Bearer {token}"}


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
