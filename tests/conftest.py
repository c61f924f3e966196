from __future__ import annotations

import importlib
from datetime import date

import pytest

FIXED_TODAY = date(2025, 1, 8)  # a Wednesday

# Modules that import today_local by name.
_TODAY_USERS = [
    "src.job_tracker.job_tracker.common.datetime_utils",
    "src.job_tracker.job_tracker.job_logs.service",
    "src.job_tracker.job_tracker.legacy_jobs.service",
    "src.job_tracker.job_tracker.hours.controller",
    "src.job_tracker.job_tracker.dashboard.controller",
]


@pytest.fixture
def fixed_today(monkeypatch) -> date:
    for name in _TODAY_USERS:
        module = importlib.import_module(name)
        monkeypatch.setattr(module, "today_local", lambda: FIXED_TODAY)
    return FIXED_TODAY
