from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, to_iso
from ..database.connection import SupabaseConnection
from ..database.postgrest import (
    Query,
    Row,
    as_decimal,
    db_client,
    delete_rows,
    embedded,
    fetchall,
    fetchone,
    insert_row,
    update_one,
)
from ..users.model import CrewRef
from .model import HoursEntry, WorkerRef
from .repository import HoursRepository

# hours has two FKs into profiles; name the worker one explicitly.
HOURS_WITH_WORKER = """
    *,
    profiles!hours_worker_id_fkey (
        id,
        first_name,
        last_name,
        email,
        hourly_rate,
        crew_id,
        crews (
            id,
            name
        )
    )
"""


def hours_from_row(row: Row) -> HoursEntry:
    worker = embedded(row, "profiles")
    worker_ref = None
    if worker:
        crew = embedded(worker, "crews")
        worker_ref = WorkerRef(
            id=str(worker["id"]),
            first_name=worker.get("first_name") or "",
            last_name=worker.get("last_name") or "",
            email=worker.get("email") or "",
            hourly_rate=as_decimal(worker.get("hourly_rate")),
            crew_id=worker.get("crew_id"),
            crew=CrewRef(id=str(crew["id"]), name=crew.get("name") or "") if crew else None,
        )

    return HoursEntry(
        id=str(row["id"]),
        worker_id=str(row["worker_id"]),
        date_worked=parse_iso_date(row["date_worked"]),
        hours_worked=as_decimal(row.get("hours_worked")) or Decimal("0"),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        worker=worker_ref,
    )


class SupabaseHoursRepository(HoursRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, hours_id: str) -> Optional[HoursEntry]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("hours").eq("id", hours_id))
            return hours_from_row(row) if row else None

    def find_for_worker_on(self, worker_id: str, day: date) -> Optional[HoursEntry]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("hours").eq("worker_id", worker_id).eq("date_worked", to_iso(day)))
            return hours_from_row(row) if row else None

    def find(
        self,
        *,
        worker_id: Optional[str] = None,
        worker_ids: Optional[Iterable[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        with_worker: bool = False,
    ) -> Sequence[HoursEntry]:
        q = Query("hours")
        if with_worker:
            q.select(HOURS_WITH_WORKER)
        if worker_id:
            q.eq("worker_id", worker_id)
        if worker_ids is not None:
            q.in_("worker_id", worker_ids)
        q.between("date_worked", to_iso(start) if start else None, to_iso(end) if end else None)
        q.order("date_worked", desc=True)

        with db_client(self._conn_factory) as client:
            return [hours_from_row(r) for r in fetchall(client, q)]

    def create(self, values: Mapping[str, Any]) -> HoursEntry:
        with db_client(self._conn_factory) as client:
            return hours_from_row(insert_row(client, "hours", dict(values)))

    def update(self, hours_id: str, changes: Mapping[str, Any]) -> HoursEntry:
        with db_client(self._conn_factory) as client:
            return hours_from_row(update_one(client, Query("hours").eq("id", hours_id), dict(changes)))

    def delete(self, hours_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query("hours").eq("id", hours_id))
