from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Crew


class CrewRepository(Protocol):
    def list_all(self) -> Sequence[Crew]:
        raise NotImplementedError

    def get_by_id(self, crew_id: str) -> Optional[Crew]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> Crew:
        raise NotImplementedError

    def update(self, crew_id: str, changes: Mapping[str, Any]) -> Crew:
        raise NotImplementedError

    def delete(self, crew_id: str) -> None:
        raise NotImplementedError
