from __future__ import annotations

from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import utc_now_iso
from ..common.validators import optional_text, require_non_empty
from ..core.constants import TRADE_IN_USE_MESSAGE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ForeignKeyViolation, ValidationError
from .model import Trade
from .repository import TradeRepository

LOGGER = structlog.get_logger(__name__)


class TradeService:
    def __init__(self, trades: TradeRepository):
        self._trades = trades

    def list_trades(self) -> Sequence[Trade]:
        return self._trades.list_all()

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        return self._trades.get_by_id(trade_id)

    def create_trade(
        self,
        *,
        current_role: Role,
        trade_name: str,
        department_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Trade:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage trades")

        trade = self._trades.create(
            {
                "trade_name": require_non_empty(trade_name, "Trade name"),
                "department_id": optional_text(department_id),
                "description": optional_text(description),
            }
        )
        LOGGER.info("trade_created", trade_id=trade.id)
        return trade

    def update_trade(
        self,
        *,
        current_role: Role,
        trade_id: str,
        trade_name: str,
        department_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Trade:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage trades")

        return self._trades.update(
            trade_id,
            {
                "trade_name": require_non_empty(trade_name, "Trade name"),
                "department_id": optional_text(department_id),
                "description": optional_text(description),
                "updated_at": utc_now_iso(),
            },
        )

    def delete_trade(self, *, current_role: Role, trade_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage trades")

        try:
            self._trades.delete(trade_id)
        except ForeignKeyViolation:
            raise ValidationError(TRADE_IN_USE_MESSAGE)
        LOGGER.info("trade_deleted", trade_id=trade_id)
