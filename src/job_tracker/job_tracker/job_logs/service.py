from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog

from ..common.datetime_utils import parse_iso_date, today_local, to_iso
from ..common.validators import optional_text
from ..core.constants import NO_CREW_MESSAGE
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..users.repository import ProfileRepository
from .model import JobLog, JobLogGroup, JobLogStats
from .repository import JobLogRepository

LOGGER = structlog.get_logger(__name__)


def summarize(logs: Iterable[JobLog]) -> JobLogStats:
    """Totals over already-loaded logs (used for the filtered admin view)."""
    count = 0
    yardage = Decimal("0")
    revenue = Decimal("0")
    for log in logs:
        count += 1
        yardage += log.yardage
        revenue += log.total
    return JobLogStats(total_jobs=count, total_yardage=yardage, total_revenue=revenue)


def search_job_logs(logs: Sequence[JobLog], text: Optional[str]) -> list[JobLog]:
    """Case-insensitive match on job, lot, elevation, crew, foreman name and notes."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(logs)

    out = []
    for log in logs:
        haystack = (
            log.job_name,
            log.lot or "",
            log.elevation_name,
            log.crew_name,
            log.foreman_name,
            log.notes or "",
        )
        if any(needle in h.lower() for h in haystack):
            out.append(log)
    return out


class JobLogService:
    """Use case: foremen log completed work; admins review, report and correct."""

    def __init__(self, logs: JobLogRepository, profiles: ProfileRepository):
        self._logs = logs
        self._profiles = profiles

    def _crew_of(self, user_id: Optional[str]) -> str:
        if not user_id:
            raise AuthenticationError("Not authenticated")
        profile = self._profiles.get_by_id(user_id)
        if not profile or not profile.crew_id:
            raise ValidationError(NO_CREW_MESSAGE)
        return profile.crew_id

    def create_job_log(
        self,
        *,
        user_id: str,
        job_id: str,
        elevation_id: str,
        lot: str,
        date_worked: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> JobLog:
        if not (job_id or "").strip() or not (elevation_id or "").strip() or not (lot or "").strip():
            raise ValidationError("Job, elevation, and lot are required fields")

        worked = parse_iso_date(date_worked) if (date_worked or "").strip() else today_local()
        crew_id = self._crew_of(user_id)

        log = self._logs.create(
            {
                "job_id": job_id.strip(),
                "elevation_id": elevation_id.strip(),
                "lot": lot.strip(),
                "date_worked": to_iso(worked),
                "crew_id": crew_id,
                "created_by": user_id,
                "notes": optional_text(notes),
            }
        )
        LOGGER.info("job_log_created", log_id=log.id, crew_id=crew_id, job_id=log.job_id)
        return log

    def list_by_crew(self, crew_id: str, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[JobLog]:
        return self._logs.find(crew_id=crew_id, start=start, end=end)

    def list_all(
        self, start: Optional[date] = None, end: Optional[date] = None, limit: Optional[int] = None
    ) -> Sequence[JobLog]:
        return self._logs.find(start=start, end=end, limit=limit)

    def list_by_job(self, job_id: str) -> Sequence[JobLog]:
        return self._logs.find(job_id=job_id)

    def list_my_crew(self, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[JobLog]:
        return self.list_by_crew(self._crew_of(user_id), start, end)

    def delete_job_log(self, *, current_role: Role, log_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete job logs")

        self._logs.delete(log_id)
        LOGGER.info("job_log_deleted", log_id=log_id)

    def stats(self, start: Optional[date] = None, end: Optional[date] = None) -> JobLogStats:
        return self._stats(self._logs.elevation_amounts(start=start, end=end))

    def crew_stats(self, crew_id: str, start: Optional[date] = None, end: Optional[date] = None) -> JobLogStats:
        return self._stats(self._logs.elevation_amounts(crew_id=crew_id, start=start, end=end))

    @staticmethod
    def _stats(amounts: Sequence[tuple[Decimal, Decimal]]) -> JobLogStats:
        return JobLogStats(
            total_jobs=len(amounts),
            total_yardage=sum((y for y, _ in amounts), Decimal("0")),
            total_revenue=sum((t for _, t in amounts), Decimal("0")),
        )

    def grouped_by_job(self, start: Optional[date] = None, end: Optional[date] = None) -> dict[str, JobLogGroup]:
        groups: dict[str, JobLogGroup] = {}
        for log in self._logs.find(start=start, end=end, order_by_job=True):
            g = groups.get(log.job_id)
            if not g:
                g = JobLogGroup(job=log.job)
                groups[log.job_id] = g
            g.logs.append(log)
            g.total_yardage += log.yardage
            g.total_revenue += log.total
        return groups
