from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.formatting import full_name
from ..users.model import CrewRef


@dataclass(frozen=True)
class WorkerRef:
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    hourly_rate: Optional[Decimal] = None
    crew_id: Optional[str] = None
    crew: Optional[CrewRef] = None

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)


@dataclass(frozen=True)
class HoursEntry:
    """A worker's self-reported hours for one day. Unique per (worker, date)."""

    id: str
    worker_id: str
    date_worked: date
    hours_worked: Decimal
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    worker: Optional[WorkerRef] = None

    @property
    def worker_name(self) -> str:
        return self.worker.full_name if self.worker else "Unknown"

    @property
    def crew_name(self) -> str:
        return self.worker.crew.name if self.worker and self.worker.crew else ""
