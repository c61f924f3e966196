from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from src.job_tracker.job_tracker.container import build_container
from src.job_tracker.job_tracker.core.constants import TRADE_IN_USE_MESSAGE
from src.job_tracker.job_tracker.core.enums import Role
from src.job_tracker.job_tracker.core.exceptions import AuthenticationError, ForeignKeyViolation, StoreError, ValidationError
from src.job_tracker.job_tracker.database.auth_api import SupabaseAuthClient
from src.job_tracker.job_tracker.database.connection import SupabaseConfig, SupabaseConnection
from src.job_tracker.job_tracker.database.postgrest import Query
from src.job_tracker.job_tracker.hours.supabase_hours_repository import SupabaseHoursRepository
from src.job_tracker.job_tracker.job_logs.supabase_job_log_repository import SupabaseJobLogRepository
from src.job_tracker.job_tracker.jobs.supabase_job_repository import SupabaseJobElevationRepository
from src.job_tracker.job_tracker.trades.service import TradeService
from src.job_tracker.job_tracker.trades.supabase_trade_repository import SupabaseTradeRepository

CONFIG = SupabaseConfig(url="http://supabase.test", anon_key="anon", service_role_key="service")


def _conn(handler, *, token=None) -> SupabaseConnection:
    return SupabaseConnection(CONFIG, token_provider=lambda: token, transport=httpx.MockTransport(handler))


def test_elevation_total_is_read_back_from_store():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[{"id": "e1", "job_id": "j1", "elevation_name": "A", "yardage": 10, "rate": 5.5, "total": 55.0}],
        )

    elevation = SupabaseJobElevationRepository(_conn(handler, token="user-token")).get_by_id("e1")

    assert elevation.total == Decimal("55.0")
    assert elevation.yardage * elevation.rate == elevation.total
    req = seen[0]
    assert req.url.path == "/rest/v1/job_elevations"
    assert req.url.params["id"] == "eq.e1"
    assert req.url.params["limit"] == "1"
    assert req.headers["apikey"] == "anon"
    assert req.headers["Authorization"] == "Bearer user-token"


def test_anon_key_is_bearer_without_session():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    assert SupabaseJobElevationRepository(_conn(handler)).list_by_job("j1") == []
    assert seen[0].headers["Authorization"] == "Bearer anon"
    assert seen[0].url.params["order"] == "elevation_name.asc"


def test_foreign_key_violation_surfaces_as_trade_in_use():
    def handler(request):
        assert request.method == "DELETE"
        assert "select" not in request.url.params
        return httpx.Response(
            409,
            json={"code": "23503", "message": "update or delete on table \"trades\" violates foreign key constraint", "details": None, "hint": None},
        )

    repo = SupabaseTradeRepository(_conn(handler))
    with pytest.raises(ForeignKeyViolation):
        repo.delete("t1")

    with pytest.raises(ValidationError) as exc:
        TradeService(repo).delete_trade(current_role=Role.ADMIN, trade_id="t1")
    assert str(exc.value) == TRADE_IN_USE_MESSAGE


def test_expired_token_raises_authentication_error():
    def handler(request):
        return httpx.Response(401, json={"code": "PGRST301", "message": "JWT expired"})

    with pytest.raises(AuthenticationError):
        SupabaseTradeRepository(_conn(handler, token="old")).list_all()


def test_other_errors_raise_store_error_with_code():
    def handler(request):
        return httpx.Response(400, json={"code": "22P02", "message": "invalid input syntax for type uuid"})

    with pytest.raises(StoreError) as exc:
        SupabaseTradeRepository(_conn(handler)).get_by_id("nope")
    assert exc.value.code == "22P02"
    assert exc.value.status_code == 400


def test_network_failure_is_store_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StoreError, match="unreachable"):
        SupabaseTradeRepository(_conn(handler)).list_all()


def test_insert_serializes_decimals_and_asks_for_representation():
    seen = []

    def handler(request):
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(201, json=[{"id": "h1", **body}])

    entry = SupabaseHoursRepository(_conn(handler)).create(
        {"worker_id": "w1", "date_worked": "2025-01-06", "hours_worked": Decimal("7.5"), "notes": None}
    )

    assert json.loads(seen[0].content)["hours_worked"] == 7.5
    assert seen[0].headers["Prefer"] == "return=representation"
    assert entry.date_worked == date(2025, 1, 6)
    assert entry.hours_worked == Decimal("7.5")


def test_hours_query_for_crew_week():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    SupabaseHoursRepository(_conn(handler)).find(
        worker_ids=["w1", "w2"], start=date(2025, 1, 6), end=date(2025, 1, 12), with_worker=True
    )

    params = seen[0].url.params
    assert params["worker_id"] == "in.(w1,w2)"
    assert params.get_list("date_worked") == ["gte.2025-01-06", "lte.2025-01-12"]
    assert params["select"].startswith("*,profiles!hours_worker_id_fkey(")


def test_query_renders_postgrest_operators():
    q = (
        Query("jobs")
        .select("""
            *,
            job_elevations ( id, total )
        """)
        .eq("active", True)
        .eq("deleted_at", None)
        .order("jobs(job_name)")
        .order("date_worked", desc=True)
        .limit(5)
    )

    assert q.params() == [
        ("select", "*,job_elevations(id,total)"),
        ("active", "eq.true"),
        ("deleted_at", "is.null"),
        ("order", "jobs(job_name).asc,date_worked.desc"),
        ("limit", "5"),
    ]


def test_password_sign_in():
    def handler(request):
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "password"
        creds = json.loads(request.content)
        if creds["password"] != "right":
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})
        return httpx.Response(
            200,
            json={"access_token": "at", "refresh_token": "rt", "user": {"id": "u1", "email": creds["email"]}},
        )

    auth = SupabaseAuthClient(_conn(handler))
    session = auth.sign_in_with_password("ann@example.com", "right")
    assert (session.access_token, session.user.id) == ("at", "u1")

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.sign_in_with_password("ann@example.com", "wrong")


def test_admin_create_user_uses_service_role():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": "u9", "email": "bo@example.com"})

    user = SupabaseAuthClient(_conn(handler, token="user-token")).admin_create_user(
        email="bo@example.com", password="secret1", user_metadata={"first_name": "Bo"}
    )

    assert user.id == "u9"
    assert seen[0].url.path == "/auth/v1/admin/users"
    assert seen[0].headers["Authorization"] == "Bearer service"
    assert seen[0].headers["apikey"] == "service"
    assert json.loads(seen[0].content)["email_confirm"] is True


def test_recent_job_logs_are_limited_in_the_store():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    SupabaseJobLogRepository(_conn(handler)).find(limit=10)

    assert seen[0].url.params["limit"] == "10"
    assert seen[0].url.params["order"] == "date_worked.desc"


def test_each_container_keeps_its_own_token_provider():
    settings = {"url": "http://supabase.test", "anon_key": "anon", "service_role_key": "service"}
    web = build_container(supabase_config=settings)
    script = build_container(supabase_config=settings, token_provider=lambda: "service")

    assert web.conn is not script.conn
    with script.conn.connect() as client:
        assert client.headers["Authorization"] == "Bearer service"
    with web.conn.connect() as client:
        assert client.headers["Authorization"] == "Bearer anon"
