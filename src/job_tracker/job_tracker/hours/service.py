from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

import structlog

from ..common.datetime_utils import parse_iso_date, to_iso, utc_now_iso
from ..common.validators import optional_text, require_number
from ..core.constants import DUPLICATE_HOURS_MESSAGE, MAX_HOURS_PER_DAY, UNIQUE_VIOLATION
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StoreError, ValidationError
from .model import HoursEntry
from .repository import HoursRepository

LOGGER = structlog.get_logger(__name__)


def _validate_hours(value: Any) -> Decimal:
    hours = require_number(value, "Hours worked")
    if hours <= 0 or hours > MAX_HOURS_PER_DAY:
        raise ValidationError(f"Hours worked must be greater than 0 and at most {MAX_HOURS_PER_DAY}")
    return hours


class HoursService:
    """Use case: workers submit daily hours; admins review the history."""

    def __init__(self, hours: HoursRepository):
        self._hours = hours

    def submit_hours(
        self,
        *,
        worker_id: str,
        date_worked: str,
        hours_worked: Any,
        notes: Optional[str] = None,
    ) -> HoursEntry:
        if not worker_id:
            raise AuthenticationError("Not authenticated")

        day = parse_iso_date(date_worked)
        hours = _validate_hours(hours_worked)

        # Uniqueness per (worker, date) is checked here before insert.
        if self._hours.find_for_worker_on(worker_id, day):
            raise ValidationError(DUPLICATE_HOURS_MESSAGE)

        try:
            entry = self._hours.create(
                {
                    "worker_id": worker_id,
                    "date_worked": to_iso(day),
                    "hours_worked": hours,
                    "notes": optional_text(notes),
                }
            )
        except StoreError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ValidationError(DUPLICATE_HOURS_MESSAGE)
            raise
        LOGGER.info("hours_submitted", hours_id=entry.id, worker_id=worker_id, date_worked=to_iso(day))
        return entry

    def _owned_entry(self, *, user_id: str, current_role: Role, hours_id: str) -> HoursEntry:
        entry = self._hours.get_by_id(hours_id)
        if not entry:
            raise ValidationError("Hours entry not found")
        if entry.worker_id != user_id and current_role != Role.ADMIN:
            raise AuthorizationError("You can only change your own hours")
        return entry

    def update_hours(
        self,
        *,
        user_id: str,
        current_role: Role,
        hours_id: str,
        date_worked: str,
        hours_worked: Any,
        notes: Optional[str] = None,
    ) -> HoursEntry:
        entry = self._owned_entry(user_id=user_id, current_role=current_role, hours_id=hours_id)

        day = parse_iso_date(date_worked)
        hours = _validate_hours(hours_worked)
        if day != entry.date_worked:
            clash = self._hours.find_for_worker_on(entry.worker_id, day)
            if clash and clash.id != entry.id:
                raise ValidationError(DUPLICATE_HOURS_MESSAGE)

        updated = self._hours.update(
            hours_id,
            {
                "date_worked": to_iso(day),
                "hours_worked": hours,
                "notes": optional_text(notes),
                "updated_at": utc_now_iso(),
            },
        )
        LOGGER.info("hours_updated", hours_id=hours_id)
        return updated

    def delete_hours(self, *, user_id: str, current_role: Role, hours_id: str) -> None:
        self._owned_entry(user_id=user_id, current_role=current_role, hours_id=hours_id)
        self._hours.delete(hours_id)
        LOGGER.info("hours_deleted", hours_id=hours_id)

    def list_my_hours(self, worker_id: str, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[HoursEntry]:
        return self._hours.find(worker_id=worker_id, start=start, end=end)

    def list_all_hours(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[HoursEntry]:
        return self._hours.find(start=start, end=end, with_worker=True)

    @staticmethod
    def total_hours(entries: Sequence[HoursEntry]) -> Decimal:
        return sum((e.hours_worked for e in entries), Decimal("0"))
