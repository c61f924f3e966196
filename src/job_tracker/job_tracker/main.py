from __future__ import annotations

import importlib
from datetime import timedelta
from typing import Optional

import structlog
from dotenv import load_dotenv
from flask import Flask, redirect, session, url_for

from config import get_settings_module

from .common.formatting import format_currency, format_date, format_number
from .common.logging import register_request_id, setup_logging
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.exceptions import AuthenticationError
from .crews.controller import register as register_crews
from .dashboard.controller import register as register_dashboard
from .hours.controller import register as register_hours
from .job_logs.controller import register as register_job_logs
from .jobs.controller import register as register_jobs
from .legacy_jobs.controller import register as register_legacy_jobs
from .trades.controller import register as register_trades
from .users.controller import register as register_users

LOGGER = structlog.get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    register_request_id(app)

    if container is None:
        supabase_config = dict(getattr(settings, "SUPABASE_CONFIG"))
        supabase_config.setdefault("timeout", getattr(settings, "HTTP_TIMEOUT", 30.0))
        container = build_container(supabase_config=supabase_config)
    app.extensions["container"] = container

    LOGGER.info("app_configured", settings=settings_module, debug=app.config["DEBUG"])

    app.add_template_filter(format_currency, "currency")
    app.add_template_filter(format_date, "date")
    app.add_template_filter(format_number, "number")

    @app.errorhandler(AuthenticationError)
    def _session_expired(e: AuthenticationError):
        # The store rejected the token mid-session.
        LOGGER.warning("session_rejected", error=str(e))
        session.clear()
        return redirect(url_for("login"))

    register_users(app, container)
    register_dashboard(app, container)
    register_crews(app, container)
    register_trades(app, container)
    register_jobs(app, container)
    register_job_logs(app, container)
    register_hours(app, container)
    register_legacy_jobs(app, container)

    return app
