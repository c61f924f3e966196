from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import JobElevation, JobTemplate, JobWithElevations


class JobTemplateRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[JobTemplate]:
        raise NotImplementedError

    def get_by_id(self, job_id: str) -> Optional[JobTemplate]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> JobTemplate:
        raise NotImplementedError

    def update(self, job_id: str, changes: Mapping[str, Any]) -> JobTemplate:
        raise NotImplementedError

    def delete(self, job_id: str) -> None:
        """The store cascades the delete to elevations and job logs."""
        raise NotImplementedError

    def list_with_elevations(self, *, active_only: bool = False) -> Sequence[JobWithElevations]:
        raise NotImplementedError


class JobElevationRepository(Protocol):
    def list_by_job(self, job_id: str) -> Sequence[JobElevation]:
        raise NotImplementedError

    def get_by_id(self, elevation_id: str) -> Optional[JobElevation]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> JobElevation:
        raise NotImplementedError

    def update(self, elevation_id: str, changes: Mapping[str, Any]) -> JobElevation:
        raise NotImplementedError

    def delete(self, elevation_id: str) -> None:
        raise NotImplementedError
