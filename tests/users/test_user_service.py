from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Optional

import pytest

from src.job_tracker.job_tracker.core.enums import Role
from src.job_tracker.job_tracker.core.exceptions import AuthenticationError, AuthorizationError, StoreError, ValidationError
from src.job_tracker.job_tracker.database.auth_api import AuthSession, AuthUser
from src.job_tracker.job_tracker.users.model import Profile
from src.job_tracker.job_tracker.users.service import AuthService, ProfileService, UserService, parse_role


class FakeAuth:
    def __init__(self):
        self.created: list[dict] = []
        self.passwords = {"ann@example.com": ("pw-123456", "u1")}

    def sign_in_with_password(self, email, password):
        known = self.passwords.get(email)
        if not known or known[0] != password:
            raise AuthenticationError("Invalid email or password")
        return AuthSession(access_token="tok", refresh_token="ref", user=AuthUser(id=known[1], email=email))

    def admin_create_user(self, *, email, password, user_metadata=None):
        self.created.append({"email": email, "password": password, "user_metadata": user_metadata})
        return AuthUser(id=f"new{len(self.created)}", email=email)


class InMemoryProfiles:
    def __init__(self, profiles=(), *, fail_update=False):
        self.rows = {p.id: p for p in profiles}
        self.fail_update = fail_update
        self.updates: list[tuple[str, dict]] = []

    def get_by_id(self, user_id) -> Optional[Profile]:
        return self.rows.get(user_id)

    def list_all(self):
        return list(self.rows.values())

    def list_by_crew(self, crew_id):
        return [p for p in self.rows.values() if p.crew_id == crew_id]

    def update(self, user_id, changes):
        self.updates.append((user_id, dict(changes)))
        if self.fail_update:
            raise StoreError("permission denied for table profiles", code="42501", status_code=403)
        current = self.rows.get(user_id) or Profile(id=user_id, email="", first_name="", last_name="", role=Role.WORKER)
        fields = dict(changes)
        fields.pop("updated_at", None)
        if "role" in fields:
            fields["role"] = Role(fields["role"])
        self.rows[user_id] = replace(current, **fields)
        return self.rows[user_id]


def _ann(**kw):
    base = dict(id="u1", email="ann@example.com", first_name="Ann", last_name="Lee", role=Role.FOREMAN, crew_id="c1")
    base.update(kw)
    return Profile(**base)


def test_authenticate_builds_session_user():
    svc = AuthService(FakeAuth(), InMemoryProfiles([_ann()]))

    user = svc.authenticate(" Ann@Example.com ", "pw-123456")

    assert user.user_id == "u1"
    assert user.role == Role.FOREMAN
    assert user.full_name == "Ann Lee"
    assert user.access_token == "tok"


def test_authenticate_rejects_bad_password_and_missing_profile():
    with pytest.raises(AuthenticationError):
        AuthService(FakeAuth(), InMemoryProfiles([_ann()])).authenticate("ann@example.com", "wrong")

    with pytest.raises(AuthenticationError):
        AuthService(FakeAuth(), InMemoryProfiles([])).authenticate("ann@example.com", "pw-123456")


def test_create_user_sets_up_profile():
    auth = FakeAuth()
    profiles = InMemoryProfiles()
    svc = UserService(auth, profiles)

    result = svc.create_user(
        current_role=Role.ADMIN,
        email="Bo@Example.com",
        password="secret1",
        first_name="Bo",
        last_name="Diaz",
        role=Role.WORKER,
        crew_id="c1",
        hourly_rate=Decimal("22.50"),
    )

    assert result.warning is None
    assert result.profile.hourly_rate == Decimal("22.50")
    assert auth.created[0]["email"] == "bo@example.com"
    assert auth.created[0]["user_metadata"] == {"first_name": "Bo", "last_name": "Diaz"}
    assert profiles.updates[0][1]["role"] == "worker"


def test_create_user_reports_partial_success_when_profile_update_fails():
    svc = UserService(FakeAuth(), InMemoryProfiles(fail_update=True))

    result = svc.create_user(
        current_role=Role.ADMIN,
        email="bo@example.com",
        password="secret1",
        first_name="Bo",
        last_name="Diaz",
        role=Role.WORKER,
    )

    assert result.user_id == "new1"
    assert result.profile is None
    assert "profile details could not be saved" in result.warning


def test_create_user_validation():
    svc = UserService(FakeAuth(), InMemoryProfiles())
    kwargs = dict(email="bo@example.com", first_name="Bo", last_name="Diaz", role=Role.WORKER)

    with pytest.raises(ValidationError, match="at least 6"):
        svc.create_user(current_role=Role.ADMIN, password="12345", **kwargs)
    with pytest.raises(AuthorizationError):
        svc.create_user(current_role=Role.FOREMAN, password="123456", **kwargs)


def test_update_user_profile_clears_crew_and_rate():
    profiles = InMemoryProfiles([_ann(hourly_rate=Decimal("20"))])
    svc = UserService(FakeAuth(), profiles)

    updated = svc.update_user_profile(
        current_role=Role.ADMIN,
        user_id="u1",
        role=Role.WORKER,
        clear_crew=True,
        clear_hourly_rate=True,
    )

    assert updated.role == Role.WORKER
    assert updated.crew_id is None
    assert updated.hourly_rate is None


def test_require_admin():
    profiles = InMemoryProfiles([_ann(), _ann(id="a1", role=Role.ADMIN)])
    svc = UserService(FakeAuth(), profiles)

    assert svc.is_admin("a1") is True
    assert svc.is_admin("u1") is False
    assert svc.require_admin(None) is None
    assert svc.require_admin("a1").id == "a1"


def test_update_my_profile_touches_only_three_fields():
    profiles = InMemoryProfiles([_ann()])
    svc = ProfileService(profiles)

    updated = svc.update_my_profile(user_id="u1", first_name="  Annie ", last_name="Lee", phone_number="   ")

    changes = profiles.updates[0][1]
    assert set(changes) == {"first_name", "last_name", "phone_number", "updated_at"}
    assert updated.first_name == "Annie"
    assert updated.phone_number is None
    assert updated.role == Role.FOREMAN


def test_parse_role():
    assert parse_role("admin") == Role.ADMIN
    with pytest.raises(ValidationError):
        parse_role("owner")
