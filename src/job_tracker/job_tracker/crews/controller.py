from __future__ import annotations

import structlog
from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.guards import admin_required, current_role
from ..container import Container
from ..core.exceptions import AuthorizationError, StoreError, ValidationError

LOGGER = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/crews", endpoint="admin_crews")
    @admin_required
    def admin_crews():
        crews, trades = [], []
        try:
            crews = container.crew_service.list_crews()
            trades = container.trade_service.list_trades()
        except StoreError as e:
            LOGGER.error("crews_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load crews: {e}", "danger")
        return render_template("admin/crews.html", crews=crews, trades=trades, active_page="admin_crews")

    @app.route("/admin/crews/create", methods=["POST"], endpoint="admin_crews_create")
    @admin_required
    def admin_crews_create():
        try:
            container.crew_service.create_crew(
                current_role=current_role(),
                name=request.form.get("name", ""),
                trade_id=request.form.get("trade_id"),
            )
            flash("Crew created.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to create crew: {e}", "danger")
        return redirect(url_for("admin_crews"))

    @app.route("/admin/crews/<crew_id>/update", methods=["POST"], endpoint="admin_crews_update")
    @admin_required
    def admin_crews_update(crew_id: str):
        try:
            container.crew_service.update_crew(
                current_role=current_role(),
                crew_id=crew_id,
                name=request.form.get("name", ""),
                trade_id=request.form.get("trade_id"),
            )
            flash("Crew updated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to update crew: {e}", "danger")
        return redirect(url_for("admin_crews"))

    @app.route("/admin/crews/<crew_id>/delete", methods=["POST"], endpoint="admin_crews_delete")
    @admin_required
    def admin_crews_delete(crew_id: str):
        try:
            container.crew_service.delete_crew(current_role=current_role(), crew_id=crew_id)
            flash("Crew deleted.", "success")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete crew: {e}", "danger")
        return redirect(url_for("admin_crews"))
