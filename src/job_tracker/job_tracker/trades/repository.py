from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Trade


class TradeRepository(Protocol):
    def list_all(self) -> Sequence[Trade]:
        raise NotImplementedError

    def get_by_id(self, trade_id: str) -> Optional[Trade]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> Trade:
        raise NotImplementedError

    def update(self, trade_id: str, changes: Mapping[str, Any]) -> Trade:
        raise NotImplementedError

    def delete(self, trade_id: str) -> None:
        """Raises ForeignKeyViolation while a crew still references the trade."""
        raise NotImplementedError
