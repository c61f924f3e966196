from __future__ import annotations

from typing import Optional

import structlog

from ..common.datetime_utils import parse_iso_date, to_iso, week_end_for
from ..common.validators import require_non_empty
from ..core.exceptions import StoreError
from ..hours.repository import HoursRepository
from ..legacy_jobs.repository import LegacyJobRepository
from ..users.repository import ProfileRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import WeeklyCrewSummary

LOGGER = structlog.get_logger(__name__)


class WeeklyComplianceService:
    """Weekly crew compliance: crew revenue vs. minimum-wage-equivalent pay."""

    def __init__(
        self,
        profiles: ProfileRepository,
        hours: HoursRepository,
        legacy_jobs: LegacyJobRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._profiles = profiles
        self._hours = hours
        self._legacy_jobs = legacy_jobs
        self._calculator = calculator or StandardPayrollCalculator()

    def weekly_crew_summary(self, crew_id: str, week_start: str) -> Optional[WeeklyCrewSummary]:
        """Return the summary, or None when any fetch fails.

        Raises ValidationError for a missing crew or a malformed week start.
        """
        crew_id = require_non_empty(crew_id, "Crew")
        start = parse_iso_date(week_start)
        end = week_end_for(start)

        try:
            members = self._profiles.list_by_crew(crew_id)
            member_ids = [m.id for m in members]
            hours = self._hours.find(worker_ids=member_ids, start=start, end=end, with_worker=True) if member_ids else []
            jobs = self._legacy_jobs.find(crew_id=crew_id, start=start, end=end)
        except StoreError as e:
            LOGGER.error(
                "weekly_summary_failed",
                crew_id=crew_id,
                week_start=to_iso(start),
                code=e.code,
                error=str(e),
            )
            return None

        summary = self._calculator.weekly_summary(
            week_start=start,
            week_end=end,
            hours=hours,
            job_totals=[j.total for j in jobs],
        )
        LOGGER.info(
            "weekly_summary_computed",
            crew_id=crew_id,
            week_start=to_iso(start),
            workers=len(summary.workers),
            is_compliant=summary.is_compliant,
        )
        return summary
