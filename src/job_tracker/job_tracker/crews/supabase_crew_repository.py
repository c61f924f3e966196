from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import SupabaseConnection
from ..database.postgrest import Query, Row, db_client, delete_rows, embedded, fetchall, fetchone, insert_row, update_one
from .model import Crew, TradeRef
from .repository import CrewRepository

CREW_WITH_TRADE = """
    *,
    trades (
        id,
        trade_name
    )
"""


def crew_from_row(row: Row) -> Crew:
    trade = embedded(row, "trades")
    return Crew(
        id=str(row["id"]),
        name=row.get("name") or "",
        trade_id=row.get("trade_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        trade=TradeRef(id=str(trade["id"]), trade_name=trade.get("trade_name") or "") if trade else None,
    )


class SupabaseCrewRepository(CrewRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Crew]:
        with db_client(self._conn_factory) as client:
            rows = fetchall(client, Query("crews").select(CREW_WITH_TRADE).order("name"))
            return [crew_from_row(r) for r in rows]

    def get_by_id(self, crew_id: str) -> Optional[Crew]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("crews").select(CREW_WITH_TRADE).eq("id", crew_id))
            return crew_from_row(row) if row else None

    def create(self, values: Mapping[str, Any]) -> Crew:
        with db_client(self._conn_factory) as client:
            return crew_from_row(insert_row(client, "crews", dict(values), columns=CREW_WITH_TRADE))

    def update(self, crew_id: str, changes: Mapping[str, Any]) -> Crew:
        with db_client(self._conn_factory) as client:
            row = update_one(client, Query("crews").select(CREW_WITH_TRADE).eq("id", crew_id), dict(changes))
            return crew_from_row(row)

    def delete(self, crew_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query("crews").eq("id", crew_id))
