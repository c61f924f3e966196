from __future__ import annotations

import structlog
from flask import Flask, flash, render_template, session

from ..common.datetime_utils import range_for_preset, to_iso, today_local
from ..common.guards import current_role, current_user_id, login_required
from ..container import Container
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.enums import DatePreset, Role
from ..core.exceptions import StoreError, ValidationError
from ..job_logs.model import JobLogStats

LOGGER = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    def _store_failed(e: StoreError, role: Role) -> None:
        LOGGER.error("dashboard_failed", role=role.value, error=str(e), code=e.code)
        flash(f"Failed to load dashboard data: {e}", "danger")

    @app.route("/", endpoint="dashboard")
    @login_required
    def dashboard():
        role = current_role()
        user_id = current_user_id()
        week_start, week_end = range_for_preset(DatePreset.THIS_WEEK)
        ctx = {
            "name": session.get("name"),
            "role": role.value,
            "week_start": to_iso(week_start),
            "week_end": to_iso(week_end),
            "today": to_iso(today_local()),
            "active_page": "dashboard",
        }

        if role == Role.ADMIN:
            logs = container.job_log_service
            ctx.update(stats=JobLogStats(), week_stats=JobLogStats(), recent_logs=[], user_count=0)
            try:
                ctx.update(
                    stats=logs.stats(),
                    week_stats=logs.stats(week_start, week_end),
                    recent_logs=logs.list_all(limit=DEFAULT_RECENT_LIMIT),
                    user_count=len(container.user_service.list_users()),
                )
            except StoreError as e:
                _store_failed(e, role)
            return render_template("dashboard/admin.html", **ctx)

        if role == Role.FOREMAN:
            ctx.update(profile=None, jobs=[], crew_logs=[], crew_stats=None, crew_error=None)
            try:
                profile = container.profile_service.get_my_profile(user_id)
                ctx.update(profile=profile, jobs=container.job_service.list_active_job_templates())
                ctx.update(
                    crew_logs=container.job_log_service.list_my_crew(user_id, week_start, week_end),
                    crew_stats=container.job_log_service.crew_stats(profile.crew_id, week_start, week_end),
                )
            except ValidationError as e:
                ctx["crew_error"] = str(e)
            except StoreError as e:
                _store_failed(e, role)
            return render_template("dashboard/foreman.html", **ctx)

        ctx.update(week_hours=0, days_logged=0, recent_hours=[])
        try:
            entries = container.hours_service.list_my_hours(user_id, week_start, week_end)
            recent = list(container.hours_service.list_my_hours(user_id))[:DEFAULT_RECENT_LIMIT]
            ctx.update(
                week_hours=container.hours_service.total_hours(entries),
                days_logged=len(entries),
                recent_hours=recent,
            )
        except StoreError as e:
            _store_failed(e, role)
        return render_template("dashboard/worker.html", **ctx)
