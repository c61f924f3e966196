from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access control."""

    ADMIN = "admin"
    FOREMAN = "foreman"
    WORKER = "worker"


class DatePreset(str, Enum):
    """Quick filters offered on the history pages."""

    ALL = "all"
    THIS_WEEK = "this-week"
    LAST_WEEK = "last-week"
    THIS_MONTH = "this-month"
