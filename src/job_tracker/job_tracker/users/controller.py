from __future__ import annotations

import structlog
from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.guards import admin_required, current_role, current_user_id, login_required
from ..common.validators import optional_number
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StoreError, ValidationError
from .service import parse_role

LOGGER = structlog.get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                s_user = container.auth_service.authenticate(email, password)

                session.clear()
                session.permanent = bool(request.form.get("remember_me"))
                session["user_id"] = s_user.user_id
                session["email"] = s_user.email
                session["name"] = s_user.full_name
                session["role"] = s_user.role.value
                session["crew_id"] = s_user.crew_id
                session["access_token"] = s_user.access_token
                session["refresh_token"] = s_user.refresh_token
                return redirect(url_for("dashboard"))
            except (AuthenticationError, ValidationError) as e:
                flash(str(e), "danger")
            except StoreError as e:
                LOGGER.error("login_failed", error=str(e), code=e.code)
                flash("The sign-in service is unavailable, please try again", "danger")

        return render_template("login.html")

    @app.route("/auth/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        container.auth_service.sign_out(session.get("access_token"))
        session.clear()
        return redirect(url_for("login"))

    @app.route("/admin/users", endpoint="admin_users")
    @admin_required
    def admin_users():
        users, crews = [], []
        try:
            users = container.user_service.list_users()
            crews = container.crew_service.list_crews()
        except StoreError as e:
            LOGGER.error("users_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load users: {e}", "danger")
        return render_template("admin/users.html", users=users, crews=crews, roles=list(Role), active_page="admin_users")

    @app.route("/admin/users/create", methods=["POST"], endpoint="admin_users_create")
    @admin_required
    def admin_users_create():
        try:
            result = container.user_service.create_user(
                current_role=current_role(),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                first_name=request.form.get("first_name", ""),
                last_name=request.form.get("last_name", ""),
                phone_number=request.form.get("phone_number"),
                role=parse_role(request.form.get("role") or Role.WORKER.value),
                crew_id=request.form.get("crew_id") or None,
                hourly_rate=optional_number(request.form.get("hourly_rate"), "Hourly rate"),
            )
            if result.warning:
                flash(f"Warning: {result.warning}", "warning")
            else:
                flash("User created.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to create user: {e}", "danger")

        return redirect(url_for("admin_users"))

    @app.route("/admin/users/<user_id>/update", methods=["POST"], endpoint="admin_users_update")
    @admin_required
    def admin_users_update(user_id: str):
        try:
            role_s = request.form.get("role")
            container.user_service.update_user_profile(
                current_role=current_role(),
                user_id=user_id,
                first_name=request.form.get("first_name"),
                last_name=request.form.get("last_name"),
                phone_number=request.form.get("phone_number"),
                role=parse_role(role_s) if role_s else None,
                crew_id=request.form.get("crew_id") or None,
                hourly_rate=request.form.get("hourly_rate"),
                clear_crew="crew_id" in request.form and not request.form.get("crew_id"),
                clear_hourly_rate="hourly_rate" in request.form and not request.form.get("hourly_rate"),
            )
            flash("User updated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except StoreError as e:
            flash(f"Failed to update user: {e}", "danger")

        return redirect(url_for("admin_users"))

    @app.route("/settings/profile", methods=["GET", "POST"], endpoint="profile_settings")
    @login_required
    def profile_settings():
        if request.method == "POST":
            try:
                profile = container.profile_service.update_my_profile(
                    user_id=current_user_id(),
                    first_name=request.form.get("first_name", ""),
                    last_name=request.form.get("last_name", ""),
                    phone_number=request.form.get("phone_number"),
                )
                session["name"] = profile.full_name
                flash("Profile updated.", "success")
                return redirect(url_for("profile_settings"))
            except ValidationError as e:
                flash(str(e), "danger")
            except StoreError as e:
                flash(f"Failed to update profile: {e}", "danger")

        try:
            profile = container.profile_service.get_my_profile(current_user_id())
        except StoreError as e:
            LOGGER.error("profile_page_failed", error=str(e), code=e.code)
            flash(f"Failed to load profile: {e}", "danger")
            return redirect(url_for("dashboard"))
        if not profile:
            return redirect(url_for("login"))
        return render_template("settings/profile.html", profile=profile, active_page="profile_settings")
