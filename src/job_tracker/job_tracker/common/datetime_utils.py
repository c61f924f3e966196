from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Mapping, Optional

from ..core.constants import WEEK_LENGTH_DAYS
from ..core.enums import DatePreset
from ..core.exceptions import ValidationError

ISO_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), ISO_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def to_iso(value: date) -> str:
    return value.strftime(ISO_FORMAT)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now().date()


def week_end_for(week_start: date) -> date:
    return week_start + timedelta(days=WEEK_LENGTH_DAYS - 1)


def start_of_week(day: date) -> date:
    """Weeks run Sunday to Saturday."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def monday_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def range_for_preset(preset: DatePreset, *, today: Optional[date] = None) -> Optional[tuple[date, date]]:
    """Inclusive (start, end) for a quick filter, or None for ``all``."""
    today = today or today_local()

    if preset == DatePreset.THIS_WEEK:
        start = start_of_week(today)
        return start, week_end_for(start)
    if preset == DatePreset.LAST_WEEK:
        start = start_of_week(today) - timedelta(days=WEEK_LENGTH_DAYS)
        return start, week_end_for(start)
    if preset == DatePreset.THIS_MONTH:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    return None


def parse_preset(value: Optional[str]) -> DatePreset:
    try:
        return DatePreset((value or DatePreset.ALL.value).strip())
    except ValueError:
        return DatePreset.ALL


def range_from_args(args: Mapping[str, str], *, today: Optional[date] = None) -> tuple[DatePreset, Optional[date], Optional[date]]:
    """Resolve list filters from query args.

    Explicit ``start``/``end`` win over the ``filter`` quick preset.
    """
    start_s = (args.get("start") or "").strip()
    end_s = (args.get("end") or "").strip()
    if start_s or end_s:
        start = parse_iso_date(start_s) if start_s else None
        end = parse_iso_date(end_s) if end_s else None
        if start and end and start > end:
            raise ValidationError("Start date must be on or before end date")
        return DatePreset.ALL, start, end

    preset = parse_preset(args.get("filter"))
    bounds = range_for_preset(preset, today=today)
    if bounds is None:
        return preset, None, None
    return preset, bounds[0], bounds[1]
