from datetime import date
from decimal import Decimal

from src.job_tracker.job_tracker.hours.model import HoursEntry, WorkerRef
from src.job_tracker.job_tracker.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _hours(entry_id, worker, day, hours):
    return HoursEntry(
        id=entry_id,
        worker_id=worker.id,
        date_worked=day,
        hours_worked=Decimal(hours),
        worker=worker,
    )


def test_minimum_pay_and_bonus_pool():
    ann = WorkerRef(id="w1", first_name="Ann", last_name="Lee", hourly_rate=Decimal("20"))
    hours = [
        _hours("h1", ann, date(2025, 1, 6), "8"),
        _hours("h2", ann, date(2025, 1, 7), "8"),
    ]

    summary = StandardPayrollCalculator().weekly_summary(
        week_start=date(2025, 1, 6),
        week_end=date(2025, 1, 12),
        hours=hours,
        job_totals=[Decimal("500")],
    )

    assert summary.total_minimum_required == Decimal("320")
    assert summary.total_job_earnings == Decimal("500")
    assert summary.bonus_pool == Decimal("180")
    assert summary.is_compliant is True
    assert len(summary.workers) == 1
    w = summary.workers[0]
    assert (w.worker_id, w.full_name, w.total_hours) == ("w1", "Ann Lee", Decimal("16"))
    assert w.minimum_required_pay == w.total_hours * w.hourly_rate


def test_missing_rate_pays_zero_and_missing_name_is_unknown():
    nameless = WorkerRef(id="w2", first_name="Bo", last_name="", hourly_rate=None)

    summary = StandardPayrollCalculator().weekly_summary(
        week_start=date(2025, 1, 6),
        week_end=date(2025, 1, 12),
        hours=[_hours("h1", nameless, date(2025, 1, 6), "10")],
        job_totals=[],
    )

    w = summary.workers[0]
    assert w.full_name == "Unknown"
    assert w.hourly_rate == Decimal("0")
    assert w.minimum_required_pay == Decimal("0")
    assert summary.is_compliant is True


def test_shortfall_is_not_compliant():
    ann = WorkerRef(id="w1", first_name="Ann", last_name="Lee", hourly_rate=Decimal("25"))

    summary = StandardPayrollCalculator().weekly_summary(
        week_start=date(2025, 1, 6),
        week_end=date(2025, 1, 12),
        hours=[_hours("h1", ann, date(2025, 1, 6), "10")],
        job_totals=[Decimal("100"), Decimal("50")],
    )

    assert summary.total_job_earnings == Decimal("150")
    assert summary.bonus_pool == Decimal("-100")
    assert summary.is_compliant is False


def test_no_hours_gives_empty_compliant_week():
    summary = StandardPayrollCalculator().weekly_summary(
        week_start=date(2025, 1, 6),
        week_end=date(2025, 1, 12),
        hours=[],
        job_totals=[],
    )

    assert summary.workers == []
    assert summary.total_job_earnings == Decimal("0")
    assert summary.total_minimum_required == Decimal("0")
    assert summary.bonus_pool == Decimal("0")
    assert summary.is_compliant is True
