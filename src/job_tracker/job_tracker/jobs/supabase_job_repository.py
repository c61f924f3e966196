from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import SupabaseConnection
from ..database.postgrest import Query, Row, as_decimal, db_client, delete_rows, fetchall, fetchone, insert_row, update_one
from .model import JobElevation, JobTemplate, JobWithElevations
from .repository import JobElevationRepository, JobTemplateRepository

JOB_WITH_ELEVATIONS = """
    *,
    job_elevations (
        id,
        job_id,
        elevation_name,
        yardage,
        rate,
        total,
        created_at,
        updated_at
    )
"""


def job_from_row(row: Row) -> JobTemplate:
    return JobTemplate(
        id=str(row["id"]),
        job_name=row.get("job_name") or "",
        active=bool(row.get("active", True)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def elevation_from_row(row: Row, *, job_id: Optional[str] = None) -> JobElevation:
    return JobElevation(
        id=str(row["id"]),
        job_id=str(row.get("job_id") or job_id or ""),
        elevation_name=row.get("elevation_name") or "",
        yardage=as_decimal(row.get("yardage")) or Decimal("0"),
        rate=as_decimal(row.get("rate")) or Decimal("0"),
        total=as_decimal(row.get("total")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class SupabaseJobTemplateRepository(JobTemplateRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, active_only: bool = False) -> Sequence[JobTemplate]:
        q = Query("jobs").order("job_name")
        if active_only:
            q.eq("active", True)
        with db_client(self._conn_factory) as client:
            return [job_from_row(r) for r in fetchall(client, q)]

    def get_by_id(self, job_id: str) -> Optional[JobTemplate]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("jobs").eq("id", job_id))
            return job_from_row(row) if row else None

    def create(self, values: Mapping[str, Any]) -> JobTemplate:
        with db_client(self._conn_factory) as client:
            return job_from_row(insert_row(client, "jobs", dict(values)))

    def update(self, job_id: str, changes: Mapping[str, Any]) -> JobTemplate:
        with db_client(self._conn_factory) as client:
            return job_from_row(update_one(client, Query("jobs").eq("id", job_id), dict(changes)))

    def delete(self, job_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query("jobs").eq("id", job_id))

    def list_with_elevations(self, *, active_only: bool = False) -> Sequence[JobWithElevations]:
        q = Query("jobs").select(JOB_WITH_ELEVATIONS).order("job_name")
        if active_only:
            q.eq("active", True)
        with db_client(self._conn_factory) as client:
            rows = fetchall(client, q)

        out = []
        for r in rows:
            job = job_from_row(r)
            elevations = [elevation_from_row(e, job_id=job.id) for e in (r.get("job_elevations") or [])]
            elevations.sort(key=lambda e: e.elevation_name)
            out.append(JobWithElevations(job=job, elevations=elevations))
        return out


class SupabaseJobElevationRepository(JobElevationRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def list_by_job(self, job_id: str) -> Sequence[JobElevation]:
        with db_client(self._conn_factory) as client:
            rows = fetchall(client, Query("job_elevations").eq("job_id", job_id).order("elevation_name"))
            return [elevation_from_row(r) for r in rows]

    def get_by_id(self, elevation_id: str) -> Optional[JobElevation]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("job_elevations").eq("id", elevation_id))
            return elevation_from_row(row) if row else None

    def create(self, values: Mapping[str, Any]) -> JobElevation:
        with db_client(self._conn_factory) as client:
            return elevation_from_row(insert_row(client, "job_elevations", dict(values)))

    def update(self, elevation_id: str, changes: Mapping[str, Any]) -> JobElevation:
        with db_client(self._conn_factory) as client:
            row = update_one(client, Query("job_elevations").eq("id", elevation_id), dict(changes))
            return elevation_from_row(row)

    def delete(self, elevation_id: str) -> None:
        with db_client(self._conn_factory) as client:
            delete_rows(client, Query("job_elevations").eq("id", elevation_id))
