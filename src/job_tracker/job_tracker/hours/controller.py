from __future__ import annotations

import structlog
from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import monday_of_week, range_from_args, to_iso, today_local
from ..common.exports import csv_response
from ..common.guards import admin_required, current_role, current_user_id, login_required
from ..container import Container
from ..core.enums import DatePreset
from ..core.exceptions import AuthorizationError, StoreError, ValidationError

LOGGER = structlog.get_logger(__name__)

CSV_FIELDS = ["date_worked", "worker_name", "email", "crew_name", "hours_worked", "hourly_rate", "notes"]


def register(app: Flask, container: Container) -> None:
    @app.route("/worker/hours", methods=["GET", "POST"], endpoint="worker_hours")
    @login_required
    def worker_hours():
        user_id = current_user_id()
        if request.method == "POST":
            try:
                container.hours_service.submit_hours(
                    worker_id=user_id,
                    date_worked=request.form.get("date_worked", ""),
                    hours_worked=request.form.get("hours_worked"),
                    notes=request.form.get("notes"),
                )
                flash("Hours submitted.", "success")
            except ValidationError as e:
                flash(str(e), "danger")
            except StoreError as e:
                flash(f"Failed to submit hours: {e}", "danger")
            return redirect(url_for("worker_hours"))

        entries = []
        try:
            entries = container.hours_service.list_my_hours(user_id)
        except StoreError as e:
            LOGGER.error("hours_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load hours: {e}", "danger")
        return render_template(
            "worker/hours.html",
            entries=entries,
            total_hours=container.hours_service.total_hours(entries),
            today=to_iso(today_local()),
            active_page="worker_hours",
        )

    @app.route("/worker/hours/<hours_id>/update", methods=["POST"], endpoint="worker_hours_update")
    @login_required
    def worker_hours_update(hours_id: str):
        try:
            container.hours_service.update_hours(
                user_id=current_user_id(),
                current_role=current_role(),
                hours_id=hours_id,
                date_worked=request.form.get("date_worked", ""),
                hours_worked=request.form.get("hours_worked"),
                notes=request.form.get("notes"),
            )
            flash("Hours updated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to update hours: {e}", "danger")
        return redirect(url_for("worker_hours"))

    @app.route("/worker/hours/<hours_id>/delete", methods=["POST"], endpoint="worker_hours_delete")
    @login_required
    def worker_hours_delete(hours_id: str):
        try:
            container.hours_service.delete_hours(user_id=current_user_id(), current_role=current_role(), hours_id=hours_id)
            flash("Hours deleted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete hours: {e}", "danger")
        return redirect(url_for("worker_hours"))

    @app.route("/admin/hours", endpoint="admin_hours")
    @admin_required
    def admin_hours():
        try:
            preset, start, end = range_from_args(request.args)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_hours"))

        entries, crews = [], []
        try:
            entries = container.hours_service.list_all_hours(start, end)
            crews = container.crew_service.list_crews()
        except StoreError as e:
            LOGGER.error("admin_hours_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load hours: {e}", "danger")

        crew_id = request.args.get("crew_id", "")
        week_start = request.args.get("week_start") or to_iso(monday_of_week(today_local()))
        summary = None
        if crew_id:
            try:
                summary = container.weekly_compliance_service.weekly_crew_summary(crew_id, week_start)
                if summary is None:
                    flash("Failed to load weekly summary", "danger")
            except ValidationError as e:
                flash(str(e), "danger")

        return render_template(
            "admin/hours.html",
            entries=entries,
            total_hours=container.hours_service.total_hours(entries),
            crews=crews,
            crew_id=crew_id,
            week_start=week_start,
            summary=summary,
            active_filter=preset.value,
            presets=list(DatePreset),
            start=to_iso(start) if start else "",
            end=to_iso(end) if end else "",
            active_page="admin_hours",
        )

    @app.route("/admin/hours/export.csv", endpoint="admin_hours_csv")
    @admin_required
    def admin_hours_csv():
        try:
            _, start, end = range_from_args(request.args)
            entries = container.hours_service.list_all_hours(start, end)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_hours"))
        except StoreError as e:
            LOGGER.error("hours_export_failed", error=str(e), code=e.code)
            flash(f"Failed to export hours: {e}", "danger")
            return redirect(url_for("admin_hours", **request.args))

        rows = [
            {
                "date_worked": to_iso(e.date_worked),
                "worker_name": e.worker_name,
                "email": e.worker.email if e.worker else "",
                "crew_name": e.crew_name,
                "hours_worked": e.hours_worked,
                "hourly_rate": e.worker.hourly_rate if e.worker and e.worker.hourly_rate is not None else "",
                "notes": e.notes or "",
            }
            for e in entries
        ]
        suffix = f"{to_iso(start)}_{to_iso(end)}" if start and end else "all"
        return csv_response(rows=rows, fieldnames=CSV_FIELDS, filename=f"hours_{suffix}.csv")

    @app.route("/api/hours/weekly-summary", endpoint="api_weekly_summary")
    @admin_required
    def api_weekly_summary():
        try:
            summary = container.weekly_compliance_service.weekly_crew_summary(
                request.args.get("crew_id", ""),
                request.args.get("week_start", ""),
            )
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        if summary is None:
            return jsonify({"success": False, "error": "Failed to load weekly summary"}), 502
        return jsonify({"success": True, "data": summary.to_dict()})
