from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TradeRef:
    id: str
    trade_name: str


@dataclass(frozen=True)
class Crew:
    """A work team, optionally tied to one trade."""

    id: str
    name: str
    trade_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    trade: Optional[TradeRef] = None

    @property
    def trade_name(self) -> Optional[str]:
        return self.trade.trade_name if self.trade else None
