from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class WorkerSummary:
    worker_id: str
    full_name: str
    hourly_rate: Decimal
    total_hours: Decimal
    minimum_required_pay: Decimal

    def to_dict(self) -> dict:
        return {
            "worker_id": self.worker_id,
            "full_name": self.full_name,
            "hourly_rate": float(self.hourly_rate),
            "total_hours": float(self.total_hours),
            "minimum_required_pay": float(self.minimum_required_pay),
        }


@dataclass(frozen=True)
class WeeklyCrewSummary:
    """One crew-week of payroll compliance.

    bonus_pool = total_job_earnings - total_minimum_required; negative means a shortfall.
    """

    week_start: date
    week_end: date
    total_job_earnings: Decimal
    total_minimum_required: Decimal
    bonus_pool: Decimal
    is_compliant: bool
    workers: list[WorkerSummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "week_start": to_iso(self.week_start),
            "week_end": to_iso(self.week_end),
            "total_job_earnings": float(self.total_job_earnings),
            "total_minimum_required": float(self.total_minimum_required),
            "bonus_pool": float(self.bonus_pool),
            "is_compliant": self.is_compliant,
            "workers": [w.to_dict() for w in self.workers],
        }
