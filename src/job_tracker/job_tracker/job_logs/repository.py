from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import JobLog


class JobLogRepository(Protocol):
    def create(self, values: Mapping[str, Any]) -> JobLog:
        raise NotImplementedError

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
        """Newest first (by job name first when ``order_by_job``), at most ``limit`` rows."""
        raise NotImplementedError

    def elevation_amounts(
        self,
        *,
        crew_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[tuple[Decimal, Decimal]]:
        """(yardage, total) of the elevation behind each matching log."""
        raise NotImplementedError

    def delete(self, log_id: str) -> None:
        raise NotImplementedError
