from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, to_iso
from ..database.connection import SupabaseConnection
from ..database.postgrest import Query, Row, as_decimal, db_client, delete_rows, embedded, fetchall, insert_row
from ..users.model import CrewRef
from .model import LegacyJob
from .repository import LegacyJobRepository

TABLE = "legacy_jobs"

LEGACY_JOB_WITH_CREW = """
    *,
    crews (
        id,
        name
    )
"""


def legacy_job_from_row(row: Row) -> LegacyJob:
    crew = embedded(row, "crews")
    return LegacyJob(
        id=str(row["id"]),
        date=parse_iso_date(row["date"]),
        job_name=row.get("job_name") or "",
        yardage=as_decimal(row.get("yardage")) or Decimal("0"),
        rate=as_decimal(row.get("rate")) or Decimal("0"),
        total=as_decimal(row.get("total")) or Decimal("0"),
        crew_id=str(row.get("crew_id") or ""),
        created_by=row.get("created_by"),
        elevation=row.get("elevation"),
        lot_address=row.get("lot_address"),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        crew=CrewRef(id=str(crew["id"]), name=crew.get("name") or "") if crew else None,
    )


class SupabaseLegacyJobRepository(LegacyJobRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def create(self, values: Mapping[str, Any]) -> LegacyJob:
        with db_client(self._conn_factory) as client:
            return legacy_job_from_row(insert_row(client, TABLE, dict(values), columns=LEGACY_JOB_WITH_CREW))

    def find(
        self,
        *,
        crew_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LegacyJob]:
        q = Query(TABLE).select(LEGACY_JOB_WITH_CREW)
        if crew_id:
            q.eq("crew_id", crew_id)
        q.between("date", to_iso(start) if start else None, to_iso(end) if end else None)
        q.order("date", desc=True).limit(limit)

        with db_client(self._conn_factory) as client:
            return [legacy_job_from_row(r) for r in fetchall(client, q)]

    def delete(self, job_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query(TABLE).eq("id", job_id))
