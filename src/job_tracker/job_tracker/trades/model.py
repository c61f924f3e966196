from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Trade:
    """A department/discipline a crew works in (e.g. Concrete, Framing)."""

    id: str
    trade_name: str
    department_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
