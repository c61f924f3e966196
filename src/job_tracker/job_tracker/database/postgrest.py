from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import httpx
import structlog

from ..core.constants import FOREIGN_KEY_VIOLATION
from ..core.exceptions import AuthenticationError, ForeignKeyViolation, StoreError
from .connection import SupabaseConnection

LOGGER = structlog.get_logger(__name__)

REST_PREFIX = "/rest/v1"
Row = Dict[str, Any]


@contextmanager
def db_client(conn_factory: SupabaseConnection, *, admin: bool = False) -> Iterator[httpx.Client]:
    client = conn_factory.connect_admin() if admin else conn_factory.connect()
    try:
        yield client
    finally:
        client.close()


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


@dataclass
class Query:
    """Row filter for one table, rendered to PostgREST query parameters."""

    table: str
    columns: str = "*"
    filters: List[Tuple[str, str]] = field(default_factory=list)
    ordering: List[str] = field(default_factory=list)
    row_limit: Optional[int] = None

    def select(self, columns: str) -> "Query":
        # Embedded joins are written on several lines for readability; PostgREST wants them compact.
        self.columns = "".join(columns.split())
        return self

    def eq(self, column: str, value: Any) -> "Query":
        op = "is" if value is None else "eq"
        self.filters.append((column, f"{op}.{_literal(value)}"))
        return self

    def gte(self, column: str, value: Any) -> "Query":
        self.filters.append((column, f"gte.{_literal(value)}"))
        return self

    def lte(self, column: str, value: Any) -> "Query":
        self.filters.append((column, f"lte.{_literal(value)}"))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> "Query":
        joined = ",".join(_literal(v) for v in values)
        self.filters.append((column, f"in.({joined})"))
        return self

    def between(self, column: str, start: Optional[Any], end: Optional[Any]) -> "Query":
        if start is not None:
            self.gte(column, start)
        if end is not None:
            self.lte(column, end)
        return self

    def order(self, column: str, *, desc: bool = False) -> "Query":
        self.ordering.append(f"{column}.{'desc' if desc else 'asc'}")
        return self

    def limit(self, count: Optional[int]) -> "Query":
        self.row_limit = count
        return self

    def params(self, *, with_select: bool = True) -> List[Tuple[str, str]]:
        out: List[Tuple[str, str]] = []
        if with_select:
            out.append(("select", self.columns))
        out.extend(self.filters)
        if self.ordering:
            out.append(("order", ",".join(self.ordering)))
        if self.row_limit is not None:
            out.append(("limit", str(int(self.row_limit))))
        return out


def _raise_for_store(response: httpx.Response, *, table: str, action: str) -> None:
    if response.is_success:
        return

    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    code = body.get("code")
    message = body.get("message") or body.get("msg") or response.text or f"HTTP {response.status_code}"

    LOGGER.error(
        "store_request_failed",
        table=table,
        action=action,
        status_code=response.status_code,
        code=code,
        message=message,
    )

    if response.status_code == 401:
        raise AuthenticationError(message)
    if code == FOREIGN_KEY_VIOLATION:
        raise ForeignKeyViolation(message, code=code, status_code=response.status_code)
    raise StoreError(message, code=code, status_code=response.status_code)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _send(client: httpx.Client, method: str, table: str, *, action: str, **kwargs) -> httpx.Response:
    if "json" in kwargs:
        kwargs["json"] = _jsonable(kwargs["json"])
    try:
        response = client.request(method, f"{REST_PREFIX}/{table}", **kwargs)
    except httpx.HTTPError as e:
        LOGGER.error("store_unreachable", table=table, action=action, error=str(e))
        raise StoreError(f"Data store unreachable: {e}") from e
    _raise_for_store(response, table=table, action=action)
    return response


def fetchall(client: httpx.Client, query: Query) -> List[Row]:
    response = _send(client, "GET", query.table, action="select", params=query.params())
    return list(response.json() or [])


def fetchone(client: httpx.Client, query: Query) -> Optional[Row]:
    rows = fetchall(client, query.limit(1))
    return rows[0] if rows else None


def insert_row(client: httpx.Client, table: str, payload: Row, *, columns: str = "*") -> Row:
    response = _send(
        client,
        "POST",
        table,
        action="insert",
        params=[("select", columns)],
        json=payload,
        headers={"Prefer": "return=representation"},
    )
    rows = response.json() or []
    if not rows:
        raise StoreError(f"Insert into {table} returned no row")
    return rows[0]


def update_rows(client: httpx.Client, query: Query, payload: Row) -> List[Row]:
    response = _send(
        client,
        "PATCH",
        query.table,
        action="update",
        params=query.params(),
        json=payload,
        headers={"Prefer": "return=representation"},
    )
    return list(response.json() or [])


def update_one(client: httpx.Client, query: Query, payload: Row) -> Row:
    rows = update_rows(client, query, payload)
    if not rows:
        raise StoreError(f"No {query.table} row matched the update", code="PGRST116")
    return rows[0]


def delete_rows(client: httpx.Client, query: Query) -> None:
    _send(client, "DELETE", query.table, action="delete", params=query.params(with_select=False))


def as_decimal(value: Any) -> Optional[Decimal]:
    """Normalize PostgREST numeric values.

    numeric columns arrive as JSON numbers or, for large precision, as strings.
    """

    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        return Decimal(str(value))
    raise TypeError(f"Unsupported numeric value type: {type(value)!r}")


def embedded(row: Row, key: str) -> Optional[Row]:
    """Return a to-one embedded resource, tolerating list or null shapes."""

    value = row.get(key)
    if isinstance(value, list):
        return value[0] if value else None
    return value or None
