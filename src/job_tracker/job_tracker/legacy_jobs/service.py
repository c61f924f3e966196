from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

import structlog

from ..common.datetime_utils import parse_iso_date, today_local, to_iso
from ..common.validators import optional_text, require_non_empty, require_number
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..job_logs.model import JobLogStats
from .model import LegacyJob
from .repository import LegacyJobRepository

LOGGER = structlog.get_logger(__name__)


class LegacyJobService:
    def __init__(self, jobs: LegacyJobRepository):
        self._jobs = jobs

    def create_job(
        self,
        *,
        user_id: str,
        job_name: str,
        yardage: Any,
        rate: Any,
        crew_id: str,
        elevation: Optional[str] = None,
        lot_address: Optional[str] = None,
        notes: Optional[str] = None,
        job_date: Optional[str] = None,
    ) -> LegacyJob:
        if not user_id:
            raise AuthenticationError("Not authenticated")

        y = require_number(yardage, "Yardage")
        r = require_number(rate, "Rate")
        if y < 0 or r < 0:
            raise ValidationError("Yardage and rate cannot be negative")

        day = parse_iso_date(job_date) if (job_date or "").strip() else today_local()
        job = self._jobs.create(
            {
                "job_name": require_non_empty(job_name, "Job name"),
                "elevation": optional_text(elevation),
                "lot_address": optional_text(lot_address),
                "yardage": y,
                "rate": r,
                "crew_id": require_non_empty(crew_id, "Crew"),
                "notes": optional_text(notes),
                "date": to_iso(day),
                "created_by": user_id,
            }
        )
        LOGGER.info("legacy_job_created", job_id=job.id, crew_id=job.crew_id)
        return job

    def list_by_crew(self, crew_id: str, limit: Optional[int] = None) -> Sequence[LegacyJob]:
        return self._jobs.find(crew_id=crew_id, limit=limit)

    def list_all(self, limit: Optional[int] = None) -> Sequence[LegacyJob]:
        return self._jobs.find(limit=limit)

    def list_by_date_range(self, start: date, end: date, crew_id: Optional[str] = None) -> Sequence[LegacyJob]:
        return self._jobs.find(crew_id=crew_id, start=start, end=end)

    def stats(self, crew_id: Optional[str] = None) -> JobLogStats:
        jobs = self._jobs.find(crew_id=crew_id)
        return JobLogStats(
            total_jobs=len(jobs),
            total_yardage=sum((j.yardage for j in jobs), Decimal("0")),
            total_revenue=sum((j.total for j in jobs), Decimal("0")),
        )

    def delete_job(self, *, current_role: Role, job_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete jobs")

        self._jobs.delete(job_id)
        LOGGER.info("legacy_job_deleted", job_id=job_id)
