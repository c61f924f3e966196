from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import LegacyJob


class LegacyJobRepository(Protocol):
    def create(self, values: Mapping[str, Any]) -> LegacyJob:
        raise NotImplementedError

    def find(
        self,
        *,
        crew_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LegacyJob]:
        """Newest first."""
        raise NotImplementedError

    def delete(self, job_id: str) -> None:
        raise NotImplementedError
