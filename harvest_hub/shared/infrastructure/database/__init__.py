from .client import (
    DataClient,
    Filter,
    QueryFailure,
    QueryResult,
    QuerySuccess,
    Row,
    SupabaseDataClient,
    eq,
    neq,
)

__all__ = [
    "DataClient",
    "Filter",
    "QueryFailure",
    "QueryResult",
    "QuerySuccess",
    "Row",
    "SupabaseDataClient",
    "eq",
    "neq",
]
