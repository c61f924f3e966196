from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from .model import HoursEntry


class HoursRepository(Protocol):
    def get_by_id(self, hours_id: str) -> Optional[HoursEntry]:
        raise NotImplementedError

    def find_for_worker_on(self, worker_id: str, day: date) -> Optional[HoursEntry]:
        raise NotImplementedError

    def find(
        self,
        *,
        worker_id: Optional[str] = None,
        worker_ids: Optional[Iterable[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        with_worker: bool = False,
    ) -> Sequence[HoursEntry]:
        """Newest first. ``with_worker`` embeds the worker profile and crew."""
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> HoursEntry:
        raise NotImplementedError

    def update(self, hours_id: str, changes: Mapping[str, Any]) -> HoursEntry:
        raise NotImplementedError

    def delete(self, hours_id: str) -> None:
        raise NotImplementedError
