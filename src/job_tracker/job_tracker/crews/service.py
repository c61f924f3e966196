from __future__ import annotations

from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import utc_now_iso
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import Crew
from .repository import CrewRepository

LOGGER = structlog.get_logger(__name__)


class CrewService:
    def __init__(self, crews: CrewRepository):
        self._crews = crews

    def list_crews(self) -> Sequence[Crew]:
        return self._crews.list_all()

    def get_crew(self, crew_id: str) -> Optional[Crew]:
        return self._crews.get_by_id(crew_id)

    def create_crew(self, *, current_role: Role, name: str, trade_id: Optional[str] = None) -> Crew:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage crews")

        crew = self._crews.create({"name": require_non_empty(name, "Crew name"), "trade_id": optional_text(trade_id)})
        LOGGER.info("crew_created", crew_id=crew.id)
        return crew

    def update_crew(self, *, current_role: Role, crew_id: str, name: str, trade_id: Optional[str] = None) -> Crew:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage crews")

        return self._crews.update(
            crew_id,
            {
                "name": require_non_empty(name, "Crew name"),
                "trade_id": optional_text(trade_id),
                "updated_at": utc_now_iso(),
            },
        )

    def delete_crew(self, *, current_role: Role, crew_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage crews")

        self._crews.delete(crew_id)
        LOGGER.info("crew_deleted", crew_id=crew_id)
