from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from ...hours.model import HoursEntry
from ..model import WeeklyCrewSummary, WorkerSummary
from .base import PayrollCalculator

ZERO = Decimal("0")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: minimum pay = hours * rate (unset rate pays 0); bonus = revenue - minimum pay."""

    def weekly_summary(
        self,
        *,
        week_start: date,
        week_end: date,
        hours: Iterable[HoursEntry],
        job_totals: Iterable[Decimal],
    ) -> WeeklyCrewSummary:
        grouped: dict[str, dict] = {}
        for h in hours:
            w = grouped.get(h.worker_id)
            if not w:
                worker = h.worker
                w = {
                    "full_name": worker.full_name if worker else "Unknown",
                    "hourly_rate": (worker.hourly_rate if worker else None) or ZERO,
                    "total_hours": ZERO,
                }
                grouped[h.worker_id] = w
            w["total_hours"] += h.hours_worked

        workers = [
            WorkerSummary(
                worker_id=worker_id,
                full_name=w["full_name"],
                hourly_rate=w["hourly_rate"],
                total_hours=w["total_hours"],
                minimum_required_pay=w["total_hours"] * w["hourly_rate"],
            )
            for worker_id, w in grouped.items()
        ]

        total_job_earnings = sum((t or ZERO for t in job_totals), ZERO)
        total_minimum_required = sum((w.minimum_required_pay for w in workers), ZERO)

        return WeeklyCrewSummary(
            week_start=week_start,
            week_end=week_end,
            total_job_earnings=total_job_earnings,
            total_minimum_required=total_minimum_required,
            bonus_pool=total_job_earnings - total_minimum_required,
            is_compliant=total_job_earnings >= total_minimum_required,
            workers=workers,
        )
