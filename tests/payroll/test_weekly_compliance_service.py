from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.job_tracker.job_tracker.core.enums import Role
from src.job_tracker.job_tracker.core.exceptions import StoreError, ValidationError
from src.job_tracker.job_tracker.hours.model import HoursEntry, WorkerRef
from src.job_tracker.job_tracker.legacy_jobs.model import LegacyJob
from src.job_tracker.job_tracker.payroll.service import WeeklyComplianceService
from src.job_tracker.job_tracker.users.model import Profile


class FakeProfiles:
    def __init__(self, profiles, *, fail=False):
        self._profiles = profiles
        self._fail = fail

    def list_by_crew(self, crew_id):
        if self._fail:
            raise StoreError("boom", code="XX000")
        return [p for p in self._profiles if p.crew_id == crew_id]


class FakeHours:
    def __init__(self, entries):
        self._entries = entries
        self.calls = []

    def find(self, *, worker_id=None, worker_ids=None, start=None, end=None, with_worker=False):
        self.calls.append({"worker_ids": list(worker_ids or []), "start": start, "end": end})
        ids = set(worker_ids or [])
        return [e for e in self._entries if e.worker_id in ids and start <= e.date_worked <= end]


class FakeLegacyJobs:
    def __init__(self, jobs):
        self._jobs = jobs
        self.calls = []

    def find(self, *, crew_id=None, start=None, end=None, limit=None):
        self.calls.append({"crew_id": crew_id, "start": start, "end": end})
        return [j for j in self._jobs if j.crew_id == crew_id and start <= j.date <= end]


def _member(pid, crew_id="c1", rate="20"):
    return Profile(
        id=pid,
        email=f"{pid}@example.com",
        first_name="Ann",
        last_name="Lee",
        role=Role.WORKER,
        crew_id=crew_id,
        hourly_rate=Decimal(rate),
    )


def _entry(eid, worker_id, day, hours, rate="20"):
    return HoursEntry(
        id=eid,
        worker_id=worker_id,
        date_worked=day,
        hours_worked=Decimal(hours),
        worker=WorkerRef(id=worker_id, first_name="Ann", last_name="Lee", hourly_rate=Decimal(rate)),
    )


def _job(jid, day, total, crew_id="c1"):
    return LegacyJob(
        id=jid,
        date=day,
        job_name="Lot 12",
        yardage=Decimal("10"),
        rate=Decimal("50"),
        total=Decimal(total),
        crew_id=crew_id,
    )


def test_week_of_2025_01_06_is_compliant_with_bonus():
    hours = FakeHours(
        [
            _entry("h1", "w1", date(2025, 1, 6), "8"),
            _entry("h2", "w1", date(2025, 1, 7), "8"),
            _entry("h3", "w1", date(2025, 1, 13), "8"),  # next week
        ]
    )
    jobs = FakeLegacyJobs([_job("j1", date(2025, 1, 10), "500"), _job("j2", date(2025, 1, 5), "900")])
    svc = WeeklyComplianceService(FakeProfiles([_member("w1")]), hours, jobs)

    summary = svc.weekly_crew_summary("c1", "2025-01-06")

    assert summary.week_start == date(2025, 1, 6)
    assert summary.week_end == date(2025, 1, 12)
    assert summary.total_minimum_required == Decimal("320")
    assert summary.total_job_earnings == Decimal("500")
    assert summary.bonus_pool == Decimal("180")
    assert summary.is_compliant is True
    assert hours.calls[0]["worker_ids"] == ["w1"]
    assert jobs.calls[0] == {"crew_id": "c1", "start": date(2025, 1, 6), "end": date(2025, 1, 12)}

    data = summary.to_dict()
    assert data["week_end"] == "2025-01-12"
    assert data["workers"][0]["minimum_required_pay"] == 320.0


def test_crew_without_members_skips_hours_fetch():
    hours = FakeHours([])
    svc = WeeklyComplianceService(FakeProfiles([]), hours, FakeLegacyJobs([]))

    summary = svc.weekly_crew_summary("c1", "2025-01-06")

    assert hours.calls == []
    assert summary.workers == []
    assert summary.is_compliant is True


def test_fetch_failure_returns_none():
    svc = WeeklyComplianceService(FakeProfiles([], fail=True), FakeHours([]), FakeLegacyJobs([]))

    assert svc.weekly_crew_summary("c1", "2025-01-06") is None


@pytest.mark.parametrize("week_start", ["", "2025-13-01", "06/01/2025"])
def test_malformed_week_start_is_rejected(week_start):
    svc = WeeklyComplianceService(FakeProfiles([]), FakeHours([]), FakeLegacyJobs([]))

    with pytest.raises(ValidationError):
        svc.weekly_crew_summary("c1", week_start)


def test_crew_is_required():
    svc = WeeklyComplianceService(FakeProfiles([]), FakeHours([]), FakeLegacyJobs([]))

    with pytest.raises(ValidationError):
        svc.weekly_crew_summary("", "2025-01-06")
