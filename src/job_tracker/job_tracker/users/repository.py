from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Profile


class ProfileRepository(Protocol):
    """Repository interface for profiles.

    Note (DIP): services depend on this interface, not on the concrete store client.
    """

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_by_crew(self, crew_id: str) -> Sequence[Profile]:
        raise NotImplementedError

    def update(self, user_id: str, changes: Mapping[str, Any]) -> Profile:
        raise NotImplementedError
