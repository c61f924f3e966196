from __future__ import annotations

import structlog
from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.guards import admin_required, current_role, login_required
from ..container import Container
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from .model import JobElevation

LOGGER = structlog.get_logger(__name__)


def elevation_to_dict(e: JobElevation) -> dict:
    return {
        "id": e.id,
        "job_id": e.job_id,
        "elevation_name": e.elevation_name,
        "yardage": float(e.yardage),
        "rate": float(e.rate),
        "total": float(e.total) if e.total is not None else None,
    }


def register(app: Flask, container: Container) -> None:
    def _back():
        return redirect(url_for("admin_jobs"))

    @app.route("/admin/jobs", endpoint="admin_jobs")
    @admin_required
    def admin_jobs():
        show = request.args.get("show", "all")
        jobs = []
        try:
            jobs = container.job_service.list_jobs_with_elevations(active_only=show == "active")
        except StoreError as e:
            LOGGER.error("jobs_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load jobs: {e}", "danger")
        return render_template("admin/jobs.html", jobs=jobs, show=show, active_page="admin_jobs")

    @app.route("/admin/jobs/create", methods=["POST"], endpoint="admin_jobs_create")
    @admin_required
    def admin_jobs_create():
        try:
            container.job_service.create_job_template(
                current_role=current_role(),
                job_name=request.form.get("job_name", ""),
                active=request.form.get("active", "1") not in {"0", "false", "off"},
            )
            flash("Job created.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to create job template: {e}", "danger")
        return _back()

    @app.route("/admin/jobs/<job_id>/update", methods=["POST"], endpoint="admin_jobs_update")
    @admin_required
    def admin_jobs_update(job_id: str):
        try:
            container.job_service.update_job_template(
                current_role=current_role(),
                job_id=job_id,
                job_name=request.form.get("job_name"),
            )
            flash("Job updated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to update job template: {e}", "danger")
        return _back()

    @app.route("/admin/jobs/<job_id>/archive", methods=["POST"], endpoint="admin_jobs_archive")
    @admin_required
    def admin_jobs_archive(job_id: str):
        try:
            container.job_service.archive_job_template(current_role=current_role(), job_id=job_id)
            flash("Job archived.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to archive job: {e}", "danger")
        return _back()

    @app.route("/admin/jobs/<job_id>/reactivate", methods=["POST"], endpoint="admin_jobs_reactivate")
    @admin_required
    def admin_jobs_reactivate(job_id: str):
        try:
            container.job_service.reactivate_job_template(current_role=current_role(), job_id=job_id)
            flash("Job reactivated.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to reactivate job: {e}", "danger")
        return _back()

    @app.route("/admin/jobs/<job_id>/delete", methods=["POST"], endpoint="admin_jobs_delete")
    @admin_required
    def admin_jobs_delete(job_id: str):
        try:
            container.job_service.delete_job_template(current_role=current_role(), job_id=job_id)
            flash("Job deleted.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete job: {e}", "danger")
        return _back()

    @app.route("/admin/jobs/<job_id>/elevations", methods=["POST"], endpoint="admin_elevations_create")
    @admin_required
    def admin_elevations_create(job_id: str):
        try:
            container.job_service.add_elevation(
                current_role=current_role(),
                job_id=job_id,
                elevation_name=request.form.get("elevation_name", ""),
                yardage=request.form.get("yardage"),
                rate=request.form.get("rate"),
            )
            flash("Elevation added.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to add elevation: {e}", "danger")
        return _back()

    @app.route("/admin/elevations/<elevation_id>/update", methods=["POST"], endpoint="admin_elevations_update")
    @admin_required
    def admin_elevations_update(elevation_id: str):
        try:
            container.job_service.update_elevation(
                current_role=current_role(),
                elevation_id=elevation_id,
                elevation_name=request.form.get("elevation_name"),
                yardage=request.form.get("yardage"),
                rate=request.form.get("rate"),
            )
            flash("Elevation updated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to update elevation: {e}", "danger")
        return _back()

    @app.route("/admin/elevations/<elevation_id>/delete", methods=["POST"], endpoint="admin_elevations_delete")
    @admin_required
    def admin_elevations_delete(elevation_id: str):
        try:
            container.job_service.delete_elevation(current_role=current_role(), elevation_id=elevation_id)
            flash("Elevation deleted.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete elevation: {e}", "danger")
        return _back()

    @app.route("/api/jobs/<job_id>/elevations", endpoint="api_job_elevations")
    @login_required
    def api_job_elevations(job_id: str):
        """Elevation dropdown data for the foreman job-log form."""
        try:
            elevations = container.job_service.list_elevations(job_id)
            return jsonify({"success": True, "data": [elevation_to_dict(e) for e in elevations]})
        except StoreError as e:
            return jsonify({"success": False, "error": str(e)}), 502
