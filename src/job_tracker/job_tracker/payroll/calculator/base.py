from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Iterable

from ...hours.model import HoursEntry
from ..model import WeeklyCrewSummary


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def weekly_summary(
        self,
        *,
        week_start: date,
        week_end: date,
        hours: Iterable[HoursEntry],
        job_totals: Iterable[Decimal],
    ) -> WeeklyCrewSummary:
        raise NotImplementedError
