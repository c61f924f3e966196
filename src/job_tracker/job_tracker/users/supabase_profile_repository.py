from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import SupabaseConnection
from ..database.postgrest import Query, Row, as_decimal, db_client, embedded, fetchall, fetchone, update_one
from .model import CrewRef, Profile
from .repository import ProfileRepository

PROFILE_WITH_CREW = """
    *,
    crews (
        id,
        name
    )
"""


def profile_from_row(row: Row) -> Profile:
    crew = embedded(row, "crews")
    return Profile(
        id=str(row["id"]),
        email=row.get("email") or "",
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        phone_number=row.get("phone_number"),
        role=Role(row.get("role") or Role.WORKER.value),
        crew_id=row.get("crew_id"),
        hourly_rate=as_decimal(row.get("hourly_rate")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        crew=CrewRef(id=str(crew["id"]), name=crew["name"]) if crew else None,
    )


class SupabaseProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        with db_client(self._conn_factory) as client:
            row = fetchone(client, Query("profiles").select(PROFILE_WITH_CREW).eq("id", user_id))
            return profile_from_row(row) if row else None

    def list_all(self) -> Sequence[Profile]:
        with db_client(self._conn_factory) as client:
            rows = fetchall(client, Query("profiles").select(PROFILE_WITH_CREW).order("created_at", desc=True))
            return [profile_from_row(r) for r in rows]

    def list_by_crew(self, crew_id: str) -> Sequence[Profile]:
        with db_client(self._conn_factory) as client:
            rows = fetchall(
                client,
                Query("profiles").select("id, email, first_name, last_name, role, crew_id, hourly_rate").eq("crew_id", crew_id),
            )
            return [profile_from_row(r) for r in rows]

    def update(self, user_id: str, changes: Mapping[str, Any]) -> Profile:
        with db_client(self._conn_factory) as client:
            row = update_one(client, Query("profiles").select(PROFILE_WITH_CREW).eq("id", user_id), dict(changes))
            return profile_from_row(row)
