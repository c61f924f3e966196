from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, request, url_for

from ..common.datetime_utils import range_from_args, to_iso
from ..common.guards import admin_required, current_role, current_user_id, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from .model import LegacyJob


def legacy_job_to_dict(j: LegacyJob) -> dict:
    return {
        "id": j.id,
        "date": to_iso(j.date),
        "job_name": j.job_name,
        "elevation": j.elevation,
        "lot_address": j.lot_address,
        "yardage": float(j.yardage),
        "rate": float(j.rate),
        "total": float(j.total),
        "crew_id": j.crew_id,
        "crew_name": j.crew_name,
        "notes": j.notes,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/legacy-jobs/create", methods=["POST"], endpoint="legacy_jobs_create")
    @roles_required(Role.ADMIN, Role.FOREMAN)
    def legacy_jobs_create():
        try:
            container.legacy_job_service.create_job(
                user_id=current_user_id(),
                job_name=request.form.get("job_name", ""),
                elevation=request.form.get("elevation"),
                lot_address=request.form.get("lot_address"),
                yardage=request.form.get("yardage"),
                rate=request.form.get("rate"),
                crew_id=request.form.get("crew_id", ""),
                notes=request.form.get("notes"),
                job_date=request.form.get("date"),
            )
            flash("Job recorded.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to record job: {e}", "danger")
        return redirect(url_for("dashboard"))

    @app.route("/admin/legacy-jobs/<job_id>/delete", methods=["POST"], endpoint="admin_legacy_jobs_delete")
    @admin_required
    def admin_legacy_jobs_delete(job_id: str):
        try:
            container.legacy_job_service.delete_job(current_role=current_role(), job_id=job_id)
            flash("Job deleted.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete job: {e}", "danger")
        return redirect(url_for("dashboard"))

    @app.route("/api/legacy-jobs", endpoint="api_legacy_jobs")
    @admin_required
    def api_legacy_jobs():
        svc = container.legacy_job_service
        crew_id = request.args.get("crew_id") or None
        try:
            _, start, end = range_from_args(request.args)
            limit = request.args.get("limit", type=int)
            if start and end:
                jobs = svc.list_by_date_range(start, end, crew_id)
            elif crew_id:
                jobs = svc.list_by_crew(crew_id, limit)
            else:
                jobs = svc.list_all(limit)
            stats = svc.stats(crew_id)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except StoreError as e:
            return jsonify({"success": False, "error": str(e)}), 502

        return jsonify({"success": True, "data": [legacy_job_to_dict(j) for j in jobs], "stats": stats.to_dict()})
