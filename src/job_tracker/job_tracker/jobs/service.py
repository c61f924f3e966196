from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

import structlog

from ..common.datetime_utils import utc_now_iso
from ..common.validators import optional_number, require_non_empty, require_number
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import JobElevation, JobTemplate, JobWithElevations
from .repository import JobElevationRepository, JobTemplateRepository

LOGGER = structlog.get_logger(__name__)


def _require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("You do not have permission to manage jobs")


def _non_negative(value: Decimal, field_name: str) -> Decimal:
    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return value


class JobService:
    """Use case: job templates (admin) and their priced elevations."""

    def __init__(self, jobs: JobTemplateRepository, elevations: JobElevationRepository):
        self._jobs = jobs
        self._elevations = elevations

    # ---- templates ----

    def list_job_templates(self) -> Sequence[JobTemplate]:
        return self._jobs.list_all()

    def list_active_job_templates(self) -> Sequence[JobTemplate]:
        return self._jobs.list_all(active_only=True)

    def get_job_template(self, job_id: str) -> Optional[JobTemplate]:
        return self._jobs.get_by_id(job_id)

    def list_jobs_with_elevations(self, *, active_only: bool = False) -> Sequence[JobWithElevations]:
        return self._jobs.list_with_elevations(active_only=active_only)

    def create_job_template(self, *, current_role: Role, job_name: str, active: bool = True) -> JobTemplate:
        _require_admin(current_role)

        job = self._jobs.create({"job_name": require_non_empty(job_name, "Job name"), "active": bool(active)})
        LOGGER.info("job_template_created", job_id=job.id)
        return job

    def update_job_template(
        self,
        *,
        current_role: Role,
        job_id: str,
        job_name: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> JobTemplate:
        _require_admin(current_role)

        changes: dict[str, Any] = {}
        if job_name is not None:
            changes["job_name"] = require_non_empty(job_name, "Job name")
        if active is not None:
            changes["active"] = bool(active)
        if not changes:
            raise ValidationError("Nothing to update")

        changes["updated_at"] = utc_now_iso()
        return self._jobs.update(job_id, changes)

    def archive_job_template(self, *, current_role: Role, job_id: str) -> JobTemplate:
        """Hide the job from foremen; elevations and past logs are kept."""
        job = self.update_job_template(current_role=current_role, job_id=job_id, active=False)
        LOGGER.info("job_template_archived", job_id=job_id)
        return job

    def reactivate_job_template(self, *, current_role: Role, job_id: str) -> JobTemplate:
        job = self.update_job_template(current_role=current_role, job_id=job_id, active=True)
        LOGGER.info("job_template_reactivated", job_id=job_id)
        return job

    def delete_job_template(self, *, current_role: Role, job_id: str) -> None:
        _require_admin(current_role)

        self._jobs.delete(job_id)
        LOGGER.info("job_template_deleted", job_id=job_id)

    # ---- elevations ----

    def list_elevations(self, job_id: str) -> Sequence[JobElevation]:
        return self._elevations.list_by_job(job_id)

    def get_elevation(self, elevation_id: str) -> Optional[JobElevation]:
        return self._elevations.get_by_id(elevation_id)

    def add_elevation(
        self,
        *,
        current_role: Role,
        job_id: str,
        elevation_name: str,
        yardage: Any,
        rate: Any,
    ) -> JobElevation:
        _require_admin(current_role)

        job_id = require_non_empty(job_id, "Job")
        elevation = self._elevations.create(
            {
                "job_id": job_id,
                "elevation_name": require_non_empty(elevation_name, "Elevation name"),
                "yardage": _non_negative(require_number(yardage, "Yardage"), "Yardage"),
                "rate": _non_negative(require_number(rate, "Rate"), "Rate"),
            }
        )
        LOGGER.info("elevation_added", job_id=job_id, elevation_id=elevation.id)
        return elevation

    def update_elevation(
        self,
        *,
        current_role: Role,
        elevation_id: str,
        elevation_name: Optional[str] = None,
        yardage: Any = None,
        rate: Any = None,
    ) -> JobElevation:
        _require_admin(current_role)

        changes: dict[str, Any] = {}
        if elevation_name is not None:
            changes["elevation_name"] = require_non_empty(elevation_name, "Elevation name")
        y = optional_number(yardage, "Yardage")
        if y is not None:
            changes["yardage"] = _non_negative(y, "Yardage")
        r = optional_number(rate, "Rate")
        if r is not None:
            changes["rate"] = _non_negative(r, "Rate")
        if not changes:
            raise ValidationError("Nothing to update")

        changes["updated_at"] = utc_now_iso()
        return self._elevations.update(elevation_id, changes)

    def delete_elevation(self, *, current_role: Role, elevation_id: str) -> None:
        _require_admin(current_role)

        self._elevations.delete(elevation_id)
        LOGGER.info("elevation_deleted", elevation_id=elevation_id)
