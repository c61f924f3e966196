from __future__ import annotations

import structlog
from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import range_from_args, to_iso
from ..common.exports import csv_response
from ..common.guards import admin_required, current_role, current_user_id, roles_required
from ..container import Container
from ..core.enums import DatePreset, Role
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from .service import search_job_logs, summarize

LOGGER = structlog.get_logger(__name__)

CSV_FIELDS = [
    "date_worked",
    "job_name",
    "elevation_name",
    "lot",
    "crew_name",
    "foreman_name",
    "yardage",
    "total",
    "notes",
]


def register(app: Flask, container: Container) -> None:
    def _filtered_logs(start, end):
        logs = container.job_log_service.list_all(start, end)
        return search_job_logs(logs, request.args.get("q"))

    @app.route("/job-logs/create", methods=["POST"], endpoint="job_logs_create")
    @roles_required(Role.FOREMAN, Role.ADMIN)
    def job_logs_create():
        try:
            container.job_log_service.create_job_log(
                user_id=current_user_id(),
                job_id=request.form.get("job_id", ""),
                elevation_id=request.form.get("elevation_id", ""),
                lot=request.form.get("lot", ""),
                date_worked=request.form.get("date_worked"),
                notes=request.form.get("notes"),
            )
            flash("Job logged.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to create job log: {e}", "danger")
        return redirect(url_for("dashboard"))

    @app.route("/admin/job-logs", endpoint="admin_job_logs")
    @admin_required
    def admin_job_logs():
        try:
            preset, start, end = range_from_args(request.args)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_job_logs"))

        logs = []
        try:
            logs = _filtered_logs(start, end)
        except StoreError as e:
            LOGGER.error("job_logs_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load job logs: {e}", "danger")

        return render_template(
            "admin/job_logs.html",
            logs=logs,
            stats=summarize(logs),
            q=request.args.get("q", ""),
            active_filter=preset.value,
            presets=list(DatePreset),
            start=to_iso(start) if start else "",
            end=to_iso(end) if end else "",
            active_page="admin_job_logs",
        )

    @app.route("/admin/job-logs/export.csv", endpoint="admin_job_logs_csv")
    @admin_required
    def admin_job_logs_csv():
        try:
            _, start, end = range_from_args(request.args)
            logs = _filtered_logs(start, end)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_job_logs"))
        except StoreError as e:
            LOGGER.error("job_logs_export_failed", error=str(e), code=e.code)
            flash(f"Failed to export job logs: {e}", "danger")
            return redirect(url_for("admin_job_logs", **request.args))

        rows = [
            {
                "date_worked": to_iso(log.date_worked),
                "job_name": log.job_name,
                "elevation_name": log.elevation_name,
                "lot": log.lot or "",
                "crew_name": log.crew_name,
                "foreman_name": log.foreman_name,
                "yardage": log.yardage,
                "total": log.total,
                "notes": log.notes or "",
            }
            for log in logs
        ]
        suffix = f"{to_iso(start)}_{to_iso(end)}" if start and end else "all"
        return csv_response(rows=rows, fieldnames=CSV_FIELDS, filename=f"job_logs_{suffix}.csv")

    @app.route("/admin/job-logs/<log_id>/delete", methods=["POST"], endpoint="admin_job_logs_delete")
    @admin_required
    def admin_job_logs_delete(log_id: str):
        try:
            container.job_log_service.delete_job_log(current_role=current_role(), log_id=log_id)
            flash("Job log deleted.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete job log: {e}", "danger")
        return redirect(url_for("admin_job_logs", **request.args))

    @app.route("/api/job-logs/stats", endpoint="api_job_log_stats")
    @admin_required
    def api_job_log_stats():
        try:
            _, start, end = range_from_args(request.args)
            crew_id = request.args.get("crew_id")
            if crew_id:
                stats = container.job_log_service.crew_stats(crew_id, start, end)
            else:
                stats = container.job_log_service.stats(start, end)
            return jsonify({"success": True, "data": stats.to_dict()})
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except StoreError as e:
            return jsonify({"success": False, "error": str(e)}), 502
