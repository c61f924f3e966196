"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the weekly compliance rule lives in the payroll service.
Run with a crew id and a week start, e.g. ``python -m examples.example_usage <crew_id> 2025-01-06``.
"""

import importlib
import sys

from config import get_settings_module

from src.job_tracker.job_tracker.common.formatting import format_currency
from src.job_tracker.job_tracker.container import build_container


def main():
    crew_id, week_start = sys.argv[1], sys.argv[2]
    settings = importlib.import_module(get_settings_module())
    container = build_container(supabase_config=settings.SUPABASE_CONFIG)

    summary = container.weekly_compliance_service.weekly_crew_summary(crew_id, week_start)
    if summary is None:
        print("Failed to load weekly summary")
        return

    print(f"Week {summary.week_start} - {summary.week_end}")
    for w in summary.workers:
        print(f"  {w.full_name}: {w.total_hours} h x {format_currency(w.hourly_rate)} = {format_currency(w.minimum_required_pay)}")
    print(f"Job earnings:     {format_currency(summary.total_job_earnings)}")
    print(f"Minimum required: {format_currency(summary.total_minimum_required)}")
    print(f"Bonus pool:       {format_currency(summary.bonus_pool)}")
    print("Compliant" if summary.is_compliant else "NOT compliant")


if __name__ == "__main__":
    main()
