from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from src.job_tracker.job_tracker.core.constants import TRADE_IN_USE_MESSAGE
from src.job_tracker.job_tracker.core.enums import Role
from src.job_tracker.job_tracker.core.exceptions import AuthorizationError, ForeignKeyViolation, ValidationError
from src.job_tracker.job_tracker.crews.model import Crew
from src.job_tracker.job_tracker.crews.service import CrewService
from src.job_tracker.job_tracker.jobs.model import JobElevation, JobTemplate, JobWithElevations
from src.job_tracker.job_tracker.jobs.service import JobService
from src.job_tracker.job_tracker.trades.model import Trade
from src.job_tracker.job_tracker.trades.service import TradeService


class InMemoryTrades:
    def __init__(self, crews: "InMemoryCrews"):
        self._crews = crews
        self.rows: dict[str, Trade] = {}

    def list_all(self):
        return sorted(self.rows.values(), key=lambda t: t.trade_name)

    def get_by_id(self, trade_id):
        return self.rows.get(trade_id)

    def create(self, values):
        t = Trade(id=f"t{len(self.rows) + 1}", **values)
        self.rows[t.id] = t
        return t

    def update(self, trade_id, changes):
        fields = {k: v for k, v in changes.items() if k != "updated_at"}
        self.rows[trade_id] = replace(self.rows[trade_id], **fields)
        return self.rows[trade_id]

    def delete(self, trade_id):
        # trades <- crews is ON DELETE RESTRICT
        if any(c.trade_id == trade_id for c in self._crews.rows.values()):
            raise ForeignKeyViolation("update or delete on table violates foreign key", code="23503", status_code=409)
        self.rows.pop(trade_id, None)


class InMemoryCrews:
    def __init__(self):
        self.rows: dict[str, Crew] = {}

    def list_all(self):
        return sorted(self.rows.values(), key=lambda c: c.name)

    def get_by_id(self, crew_id):
        return self.rows.get(crew_id)

    def create(self, values):
        c = Crew(id=f"c{len(self.rows) + 1}", **values)
        self.rows[c.id] = c
        return c

    def update(self, crew_id, changes):
        fields = {k: v for k, v in changes.items() if k != "updated_at"}
        self.rows[crew_id] = replace(self.rows[crew_id], **fields)
        return self.rows[crew_id]

    def delete(self, crew_id):
        self.rows.pop(crew_id, None)


class InMemoryJobs:
    def __init__(self, elevations: "InMemoryElevations"):
        self._elevations = elevations
        self.rows: dict[str, JobTemplate] = {}
        self.updates: list[dict] = []

    def list_all(self, *, active_only=False):
        rows = sorted(self.rows.values(), key=lambda j: j.job_name)
        return [j for j in rows if j.active or not active_only]

    def get_by_id(self, job_id):
        return self.rows.get(job_id)

    def create(self, values):
        j = JobTemplate(id=f"j{len(self.rows) + 1}", **values)
        self.rows[j.id] = j
        return j

    def update(self, job_id, changes):
        self.updates.append(dict(changes))
        fields = {k: v for k, v in changes.items() if k != "updated_at"}
        self.rows[job_id] = replace(self.rows[job_id], **fields)
        return self.rows[job_id]

    def delete(self, job_id):
        self.rows.pop(job_id, None)
        for e in list(self._elevations.rows.values()):
            if e.job_id == job_id:
                self._elevations.delete(e.id)

    def list_with_elevations(self, *, active_only=False):
        return [JobWithElevations(job=j, elevations=list(self._elevations.list_by_job(j.id))) for j in self.list_all(active_only=active_only)]


class InMemoryElevations:
    def __init__(self):
        self.rows: dict[str, JobElevation] = {}
        self.payloads: list[dict] = []

    def list_by_job(self, job_id):
        return sorted((e for e in self.rows.values() if e.job_id == job_id), key=lambda e: e.elevation_name)

    def get_by_id(self, elevation_id):
        return self.rows.get(elevation_id)

    def create(self, values):
        self.payloads.append(dict(values))
        # The store generates total.
        e = JobElevation(id=f"e{len(self.rows) + 1}", total=values["yardage"] * values["rate"], **values)
        self.rows[e.id] = e
        return e

    def update(self, elevation_id, changes):
        self.payloads.append(dict(changes))
        fields = {k: v for k, v in changes.items() if k != "updated_at"}
        e = replace(self.rows[elevation_id], **fields)
        e = replace(e, total=e.yardage * e.rate)
        self.rows[elevation_id] = e
        return e

    def delete(self, elevation_id):
        self.rows.pop(elevation_id, None)


@pytest.fixture
def catalog():
    crews = InMemoryCrews()
    trades = InMemoryTrades(crews)
    elevations = InMemoryElevations()
    jobs = InMemoryJobs(elevations)
    return {
        "crews": CrewService(crews),
        "trades": TradeService(trades),
        "jobs": JobService(jobs, elevations),
        "jobs_repo": jobs,
        "elevations_repo": elevations,
    }


def test_deleting_referenced_trade_fails_with_message(catalog):
    trade = catalog["trades"].create_trade(current_role=Role.ADMIN, trade_name="Concrete")
    catalog["crews"].create_crew(current_role=Role.ADMIN, name="Alpha", trade_id=trade.id)

    with pytest.raises(ValidationError) as exc:
        catalog["trades"].delete_trade(current_role=Role.ADMIN, trade_id=trade.id)

    assert str(exc.value) == TRADE_IN_USE_MESSAGE
    assert catalog["trades"].get_trade(trade.id) is not None


def test_deleting_unreferenced_trade_succeeds(catalog):
    trade = catalog["trades"].create_trade(current_role=Role.ADMIN, trade_name="Framing", description=" ")

    assert trade.description is None
    catalog["trades"].delete_trade(current_role=Role.ADMIN, trade_id=trade.id)
    assert catalog["trades"].list_trades() == []


def test_trade_name_required(catalog):
    with pytest.raises(ValidationError, match="Trade name is required"):
        catalog["trades"].create_trade(current_role=Role.ADMIN, trade_name="   ")


def test_crew_management_is_admin_only(catalog):
    with pytest.raises(AuthorizationError):
        catalog["crews"].create_crew(current_role=Role.FOREMAN, name="Alpha")


def test_crew_update_can_clear_trade(catalog):
    crew = catalog["crews"].create_crew(current_role=Role.ADMIN, name="Alpha", trade_id="t9")

    updated = catalog["crews"].update_crew(current_role=Role.ADMIN, crew_id=crew.id, name="Alpha 2", trade_id="")

    assert updated.name == "Alpha 2"
    assert updated.trade_id is None


def test_archive_and_reactivate_keep_elevations(catalog):
    svc = catalog["jobs"]
    job = svc.create_job_template(current_role=Role.ADMIN, job_name="Maple Ridge")
    svc.add_elevation(current_role=Role.ADMIN, job_id=job.id, elevation_name="A", yardage="10", rate="5.5")

    archived = svc.archive_job_template(current_role=Role.ADMIN, job_id=job.id)
    assert archived.active is False
    assert len(svc.list_elevations(job.id)) == 1
    assert svc.list_active_job_templates() == []
    assert catalog["jobs_repo"].updates[-1]["active"] is False
    assert "updated_at" in catalog["jobs_repo"].updates[-1]

    reactivated = svc.reactivate_job_template(current_role=Role.ADMIN, job_id=job.id)
    assert reactivated.active is True
    assert [j.id for j in svc.list_active_job_templates()] == [job.id]


def test_elevation_total_comes_from_store(catalog):
    svc = catalog["jobs"]
    job = svc.create_job_template(current_role=Role.ADMIN, job_name="Maple Ridge")

    e = svc.add_elevation(current_role=Role.ADMIN, job_id=job.id, elevation_name="A", yardage="10", rate="5.5")
    svc.update_elevation(current_role=Role.ADMIN, elevation_id=e.id, rate="6")

    assert e.total == Decimal("55.0")
    assert all("total" not in p for p in catalog["elevations_repo"].payloads)
    assert svc.get_elevation(e.id).total == Decimal("60")


def test_elevation_requires_numbers(catalog):
    svc = catalog["jobs"]
    job = svc.create_job_template(current_role=Role.ADMIN, job_name="Maple Ridge")

    with pytest.raises(ValidationError, match="Yardage must be a number"):
        svc.add_elevation(current_role=Role.ADMIN, job_id=job.id, elevation_name="A", yardage="ten", rate="5")


def test_delete_job_removes_elevations(catalog):
    svc = catalog["jobs"]
    job = svc.create_job_template(current_role=Role.ADMIN, job_name="Maple Ridge")
    svc.add_elevation(current_role=Role.ADMIN, job_id=job.id, elevation_name="A", yardage="1", rate="1")

    svc.delete_job_template(current_role=Role.ADMIN, job_id=job.id)

    assert svc.list_job_templates() == []
    assert svc.list_elevations(job.id) == []


def test_jobs_with_elevations_filter(catalog):
    svc = catalog["jobs"]
    a = svc.create_job_template(current_role=Role.ADMIN, job_name="A")
    svc.create_job_template(current_role=Role.ADMIN, job_name="B", active=False)

    assert [x.job.id for x in svc.list_jobs_with_elevations(active_only=True)] == [a.id]
    assert len(svc.list_jobs_with_elevations()) == 2
