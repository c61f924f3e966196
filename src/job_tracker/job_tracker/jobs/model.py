from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class JobTemplate:
    """Admin-defined unit of work. Any crew can log against an active template."""

    id: str
    job_name: str
    active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class JobElevation:
    """Priced sub-unit of a job template.

    ``total`` is generated by the store (yardage * rate) and is only ever read back.
    """

    id: str
    job_id: str
    elevation_name: str
    yardage: Decimal
    rate: Decimal
    total: Optional[Decimal] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class JobWithElevations:
    job: JobTemplate
    elevations: list[JobElevation] = field(default_factory=list)
