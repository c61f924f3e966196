from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..users.model import CrewRef


@dataclass(frozen=True)
class LegacyJob:
    """Flat job record from before job templates; still the source of crew revenue.

    ``total`` is generated by the store.
    """

    id: str
    date: date
    job_name: str
    yardage: Decimal
    rate: Decimal
    crew_id: str
    created_by: Optional[str] = None
    total: Decimal = Decimal("0")
    elevation: Optional[str] = None
    lot_address: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    crew: Optional[CrewRef] = None

    @property
    def crew_name(self) -> str:
        return self.crew.name if self.crew else ""
