from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import SupabaseConnection
from ..database.postgrest import Query, Row, db_client, delete_rows, fetchall, fetchone, insert_row, update_one
from .model import Trade
from .repository import TradeRepository


def trade_from_row(row: Row) -> Trade:
    return Trade(
        id=str(row["id"]),
        trade_name=row.get("trade_name") or "",
        department_id=row.get("department_id"),
        description=row.get("description"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SupabaseTradeRepository(TradeRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Trade]:
        with db_client(self._conn_factory) as client:
            rows = fetchall(client, Query("trades").order("trade_name"))
            return [trade_from_row(r) for r in rows]

    def get_by_id(self, trade_id: str) -> Optional[Trade]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("trades").eq("id", trade_id))
            return trade_from_row(row) if row else None

    def create(self, values: Mapping[str, Any]) -> Trade:
        with db_client(self._conn_factory) as client:
            return trade_from_row(insert_row(client, "trades", dict(values)))

    def update(self, trade_id: str, changes: Mapping[str, Any]) -> Trade:
        with db_client(self._conn_factory) as client:
            return trade_from_row(update_one(client, Query("trades").eq("id", trade_id), dict(changes)))

    def delete(self, trade_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query("trades").eq("id", trade_id))
