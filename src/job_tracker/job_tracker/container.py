from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import has_request_context, session

from .crews.service import CrewService
from .crews.supabase_crew_repository import SupabaseCrewRepository
from .database.auth_api import SupabaseAuthClient
from .database.connection import SupabaseConfig, SupabaseConnection, TokenProvider
from .hours.service import HoursService
from .hours.supabase_hours_repository import SupabaseHoursRepository
from .job_logs.service import JobLogService
from .job_logs.supabase_job_log_repository import SupabaseJobLogRepository
from .jobs.service import JobService
from .jobs.supabase_job_repository import SupabaseJobElevationRepository, SupabaseJobTemplateRepository
from .legacy_jobs.service import LegacyJobService
from .legacy_jobs.supabase_legacy_job_repository import SupabaseLegacyJobRepository
from .payroll.service import WeeklyComplianceService
from .trades.service import TradeService
from .trades.supabase_trade_repository import SupabaseTradeRepository
from .users.service import AuthService, ProfileService, UserService
from .users.supabase_profile_repository import SupabaseProfileRepository


def session_access_token() -> Optional[str]:
    """Signed-in user's token, so the store applies row-level security for them."""
    if not has_request_context():
        return None
    return session.get("access_token")


@dataclass(frozen=True)
class Container:
    conn: SupabaseConnection

    auth_service: AuthService
    user_service: UserService
    profile_service: ProfileService
    crew_service: CrewService
    trade_service: TradeService
    job_service: JobService
    job_log_service: JobLogService
    hours_service: HoursService
    legacy_job_service: LegacyJobService
    weekly_compliance_service: WeeklyComplianceService


def build_container(*, supabase_config: dict, token_provider: Optional[TokenProvider] = None) -> Container:
    config = SupabaseConfig(
        url=str(supabase_config["url"]),
        anon_key=str(supabase_config["anon_key"]),
        service_role_key=str(supabase_config.get("service_role_key") or ""),
        timeout=float(supabase_config.get("timeout", 30.0)),
    )
    conn = SupabaseConnection(config, token_provider=token_provider or session_access_token)

    auth_client = SupabaseAuthClient(conn)
    profiles_repo = SupabaseProfileRepository(conn)
    crews_repo = SupabaseCrewRepository(conn)
    trades_repo = SupabaseTradeRepository(conn)
    jobs_repo = SupabaseJobTemplateRepository(conn)
    elevations_repo = SupabaseJobElevationRepository(conn)
    job_logs_repo = SupabaseJobLogRepository(conn)
    hours_repo = SupabaseHoursRepository(conn)
    legacy_jobs_repo = SupabaseLegacyJobRepository(conn)

    return Container(
        conn=conn,
        auth_service=AuthService(auth_client, profiles_repo),
        user_service=UserService(auth_client, profiles_repo),
        profile_service=ProfileService(profiles_repo),
        crew_service=CrewService(crews_repo),
        trade_service=TradeService(trades_repo),
        job_service=JobService(jobs_repo, elevations_repo),
        job_log_service=JobLogService(job_logs_repo, profiles_repo),
        hours_service=HoursService(hours_repo),
        legacy_job_service=LegacyJobService(legacy_jobs_repo),
        weekly_compliance_service=WeeklyComplianceService(profiles_repo, hours_repo, legacy_jobs_repo),
    )
