from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, to_iso
from ..database.connection import SupabaseConnection
from ..database.postgrest import Query, Row, as_decimal, db_client, delete_rows, embedded, fetchall, insert_row
from ..jobs.supabase_job_repository import elevation_from_row, job_from_row
from ..users.model import CrewRef
from .model import JobLog, PersonRef
from .repository import JobLogRepository

JOB_LOG_DETAILS = """
    *,
    jobs (
        id,
        job_name,
        active
    ),
    job_elevations (
        id,
        job_id,
        elevation_name,
        yardage,
        rate,
        total
    ),
    crews (
        id,
        name
    ),
    profiles (
        id,
        first_name,
        last_name,
        email
    )
"""

ELEVATION_AMOUNTS = """
    id,
    job_elevations (
        yardage,
        total
    )
"""


def job_log_from_row(row: Row) -> JobLog:
    job = embedded(row, "jobs")
    elevation = embedded(row, "job_elevations")
    crew = embedded(row, "crews")
    creator = embedded(row, "profiles")
    return JobLog(
        id=str(row["id"]),
        job_id=str(row.get("job_id") or ""),
        elevation_id=str(row.get("elevation_id") or ""),
        lot=row.get("lot"),
        date_worked=parse_iso_date(row["date_worked"]),
        crew_id=str(row.get("crew_id") or ""),
        created_by=str(row.get("created_by") or ""),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        job=job_from_row(job) if job else None,
        elevation=elevation_from_row(elevation, job_id=row.get("job_id")) if elevation else None,
        crew=CrewRef(id=str(crew["id"]), name=crew.get("name") or "") if crew else None,
        creator=PersonRef(
            id=str(creator["id"]),
            first_name=creator.get("first_name") or "",
            last_name=creator.get("last_name") or "",
            email=creator.get("email") or "",
        )
        if creator
        else None,
    )


class SupabaseJobLogRepository(JobLogRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def create(self, values: Mapping[str, Any]) -> JobLog:
        with db_client(self._conn_factory) as client:
            return job_log_from_row(insert_row(client, "job_logs", dict(values), columns=JOB_LOG_DETAILS))

    def find(
        self,
        *,
        crew_id: Optional[str] = None,
        job_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        order_by_job: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[JobLog]:
        q = Query("job_logs").select(JOB_LOG_DETAILS)
        if crew_id:
            q.eq("crew_id", crew_id)
        if job_id:
            q.eq("job_id", job_id)
        q.between("date_worked", to_iso(start) if start else None, to_iso(end) if end else None)
        if order_by_job:
            q.order("jobs(job_name)")
        q.order("date_worked", desc=True)
        q.limit(limit)

        with db_client(self._conn_factory) as client:
            return [job_log_from_row(r) for r in fetchall(client, q)]

    def elevation_amounts(
        self,
        *,
        crew_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[tuple[Decimal, Decimal]]:
        q = Query("job_logs").select(ELEVATION_AMOUNTS)
        if crew_id:
            q.eq("crew_id", crew_id)
        q.between("date_worked", to_iso(start) if start else None, to_iso(end) if end else None)

        with db_client(self._conn_factory) as client:
            rows = fetchall(client, q)

        out = []
        for r in rows:
            e = embedded(r, "job_elevations") or {}
            out.append((as_decimal(e.get("yardage")) or Decimal("0"), as_decimal(e.get("total")) or Decimal("0")))
        return out

    def delete(self, log_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query("job_logs").eq("id", log_id))
