# 📄 File: harvest_hub/shared/infrastructure/database/client.py
# 🧭 Purpose (Layman Explanation):
# This file is the single doorway to our hosted database. Every part of the app asks it
# to find, add, change or remove rows, and it answers with either the rows or an error.
# 🧪 Purpose (Technical Summary):
# Table-scoped query client over the Supabase (PostgREST) async query builder. Query
# outcomes are returned as a discriminated QueryResult (QuerySuccess | QueryFailure)
# instead of mixed data/error tuples; repositories decide how to surface failures.
# 🔗 Dependencies:
# supabase (AsyncClient), postgrest (APIError), dataclasses, abc
# 🔄 Connected Modules / Calls From:
# harvest_hub.main (constructed in lifespan), user/garden/crop repositories, test fakes

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from postgrest.exceptions import APIError
from supabase import AsyncClient

from harvest_hub.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# PostgreSQL error code for unique constraint violations
UNIQUE_VIOLATION = "23505"
# Malformed literal for a typed column, e.g. a non-UUID id in a filter
INVALID_TEXT_REPRESENTATION = "22P02"


# =============================================================================
# FILTERS
# =============================================================================

@dataclass(frozen=True)
class Filter:
    """A single column predicate applied to a query."""
    column: str
    op: str
    value: Any

    SUPPORTED_OPS = ("eq", "neq")

    def __post_init__(self):
        if self.op not in self.SUPPORTED_OPS:
            raise ValueError(f"Unsupported filter operator: {self.op}")


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, "neq", value)


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class QuerySuccess:
    """Rows returned by a successful query (empty when nothing matched)."""
    rows: List[Row] = field(default_factory=list)
    ok: bool = field(default=True, init=False)

    def rows_or_raise(self, message: str = "Database error") -> List[Row]:
        return self.rows


@dataclass(frozen=True)
class QueryFailure:
    """Error reported by the store for a query."""
    message: str
    code: Optional[str] = None
    table: Optional[str] = None
    operation: Optional[str] = None
    ok: bool = field(default=False, init=False)

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    def rows_or_raise(self, message: str = "Database error") -> List[Row]:
        raise DatabaseError(
            message=message,
            operation=self.operation,
            table=self.table,
            db_code=self.code,
        )


QueryResult = Union[QuerySuccess, QueryFailure]


# =============================================================================
# CLIENT INTERFACE
# =============================================================================

class DataClient(ABC):
    """
    Generic table-scoped data access interface.

    Implementations must never raise for query errors reported by the store;
    those come back as QueryFailure. Update and delete return the affected
    rows so callers can treat an empty result as "no row matched".
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> QueryResult:
        """Fetch rows matching every filter."""

    @abstractmethod
    async def insert(self, table: str, values: Mapping[str, Any]) -> QueryResult:
        """Insert one row and return it."""

    @abstractmethod
    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Sequence[Filter],
    ) -> QueryResult:
        """Update rows matching every filter and return them."""

    @abstractmethod
    async def delete(self, table: str, filters: Sequence[Filter]) -> QueryResult:
        """Delete rows matching every filter and return them."""


# =============================================================================
# SUPABASE IMPLEMENTATION
# =============================================================================

class SupabaseDataClient(DataClient):
    """DataClient backed by the Supabase async PostgREST query builder."""

    def __init__(self, client: AsyncClient):
        self._client = client

    @staticmethod
    def _apply_filters(query, filters: Sequence[Filter]):
        for item in filters:
            query = getattr(query, item.op)(item.column, item.value)
        return query

    async def _execute(self, query, table: str, operation: str) -> QueryResult:
        try:
            response = await query.execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION and operation != "insert":
                logger.debug(f"Supabase {operation} on '{table}' matched nothing: {e.message}")
                return QuerySuccess(rows=[])
            logger.error(f"Supabase {operation} on '{table}' failed: {e.message} (code={e.code})")
            return QueryFailure(
                message=e.message or str(e),
                code=e.code,
                table=table,
                operation=operation,
            )

        data = response.data if response is not None else None
        if data is None:
            rows: List[Row] = []
        elif isinstance(data, list):
            rows = data
        else:
            rows = [data]
        logger.debug(f"Supabase {operation} on '{table}' returned {len(rows)} row(s)")
        return QuerySuccess(rows=rows)

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> QueryResult:
        query = self._client.table(table).select(columns)
        query = self._apply_filters(query, filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        return await self._execute(query, table, "select")

    async def insert(self, table: str, values: Mapping[str, Any]) -> QueryResult:
        query = self._client.table(table).insert(dict(values))
        return await self._execute(query, table, "insert")

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Sequence[Filter],
    ) -> QueryResult:
        if not filters:
            raise ValueError("Refusing to update without filters")
        query = self._client.table(table).update(dict(values))
        query = self._apply_filters(query, filters)
        return await self._execute(query, table, "update")

    async def delete(self, table: str, filters: Sequence[Filter]) -> QueryResult:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        query = self._client.table(table).delete()
        query = self._apply_filters(query, filters)
        return await self._execute(query, table, "delete")
