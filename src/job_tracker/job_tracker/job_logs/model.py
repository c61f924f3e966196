from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.formatting import full_name
from ..jobs.model import JobElevation, JobTemplate
from ..users.model import CrewRef


@dataclass(frozen=True)
class PersonRef:
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)


@dataclass(frozen=True)
class JobLog:
    """A foreman's record of work performed against one job elevation.

    ``crew_id`` is the creator's crew at the time of logging. Logs are immutable.
    """

    id: str
    job_id: str
    elevation_id: str
    lot: Optional[str]
    date_worked: date
    crew_id: str
    created_by: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
    job: Optional[JobTemplate] = None
    elevation: Optional[JobElevation] = None
    crew: Optional[CrewRef] = None
    creator: Optional[PersonRef] = None

    @property
    def job_name(self) -> str:
        return self.job.job_name if self.job else ""

    @property
    def elevation_name(self) -> str:
        return self.elevation.elevation_name if self.elevation else ""

    @property
    def crew_name(self) -> str:
        return self.crew.name if self.crew else ""

    @property
    def foreman_name(self) -> str:
        return self.creator.full_name if self.creator else ""

    @property
    def yardage(self) -> Decimal:
        return self.elevation.yardage if self.elevation else Decimal("0")

    @property
    def total(self) -> Decimal:
        if self.elevation and self.elevation.total is not None:
            return self.elevation.total
        return Decimal("0")


@dataclass(frozen=True)
class JobLogStats:
    total_jobs: int = 0
    total_yardage: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "totalJobs": self.total_jobs,
            "totalYardage": float(self.total_yardage),
            "totalRevenue": float(self.total_revenue),
        }


@dataclass
class JobLogGroup:
    job: Optional[JobTemplate]
    logs: list[JobLog] = field(default_factory=list)
    total_yardage: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
