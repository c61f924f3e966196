from __future__ import annotations

import structlog
from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.guards import admin_required, current_role
from ..container import Container
from ..core.exceptions import AuthorizationError, StoreError, ValidationError

LOGGER = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/trades", endpoint="admin_trades")
    @admin_required
    def admin_trades():
        trades = []
        try:
            trades = container.trade_service.list_trades()
        except StoreError as e:
            LOGGER.error("trades_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load trades: {e}", "danger")
        return render_template("admin/trades.html", trades=trades, active_page="admin_trades")

    @app.route("/admin/trades/create", methods=["POST"], endpoint="admin_trades_create")
    @admin_required
    def admin_trades_create():
        try:
            container.trade_service.create_trade(
                current_role=current_role(),
                trade_name=request.form.get("trade_name", ""),
                department_id=request.form.get("department_id"),
                description=request.form.get("description"),
            )
            flash("Trade created.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to create trade: {e}", "danger")
        return redirect(url_for("admin_trades"))

    @app.route("/admin/trades/<trade_id>/update", methods=["POST"], endpoint="admin_trades_update")
    @admin_required
    def admin_trades_update(trade_id: str):
        try:
            container.trade_service.update_trade(
                current_role=current_role(),
                trade_id=trade_id,
                trade_name=request.form.get("trade_name", ""),
                department_id=request.form.get("department_id"),
                description=request.form.get("description"),
            )
            flash("Trade updated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to update trade: {e}", "danger")
        return redirect(url_for("admin_trades"))

    @app.route("/admin/trades/<trade_id>/delete", methods=["POST"], endpoint="admin_trades_delete")
    @admin_required
    def admin_trades_delete(trade_id: str):
        try:
            container.trade_service.delete_trade(current_role=current_role(), trade_id=trade_id)
            flash("Trade deleted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to delete trade: {e}", "danger")
        return redirect(url_for("admin_trades"))
