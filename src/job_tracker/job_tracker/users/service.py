from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog

from ..common.datetime_utils import utc_now_iso
from ..common.validators import optional_number, optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StoreError, ValidationError
from ..database.auth_api import AuthUser, SupabaseAuthClient
from .model import CreateUserResult, Profile, SessionUser
from .repository import ProfileRepository

LOGGER = structlog.get_logger(__name__)


def parse_role(value: Optional[str]) -> Role:
    try:
        return Role((value or "").strip())
    except ValueError:
        raise ValidationError("Invalid role")


class AuthService:
    """Use case: sign in / sign out against the auth provider."""

    def __init__(self, auth: SupabaseAuthClient, profiles: ProfileRepository):
        self._auth = auth
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        if not password:
            raise AuthenticationError("Invalid email or password")

        auth_session = self._auth.sign_in_with_password(email, password)

        profile = self._profiles.get_by_id(auth_session.user.id)
        if not profile:
            # Profiles are provisioned with the account; a missing one means the account is unusable.
            LOGGER.warning("login_without_profile", user_id=auth_session.user.id)
            raise AuthenticationError("No profile found for this account")

        LOGGER.info("user_signed_in", user_id=profile.id, role=profile.role.value)
        return SessionUser(
            user_id=profile.id,
            email=profile.email or auth_session.user.email,
            full_name=profile.full_name,
            role=profile.role,
            crew_id=profile.crew_id,
            access_token=auth_session.access_token,
            refresh_token=auth_session.refresh_token,
        )

    def current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token:
            return None
        return self._auth.get_user(access_token)

    def sign_out(self, access_token: Optional[str]) -> None:
        if access_token:
            self._auth.sign_out(access_token)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, auth: SupabaseAuthClient, profiles: ProfileRepository):
        self._auth = auth
        self._profiles = profiles

    def list_users(self):
        return self._profiles.list_all()

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get_by_id(user_id)

    def is_admin(self, user_id: Optional[str]) -> bool:
        return self.require_admin(user_id) is not None

    def require_admin(self, user_id: Optional[str]) -> Optional[Profile]:
        """Return the admin's profile, or None when the user is missing or not an admin."""
        if not user_id:
            return None
        profile = self._profiles.get_by_id(user_id)
        if not profile or profile.role != Role.ADMIN:
            return None
        return profile

    def create_user(
        self,
        *,
        current_role: Role,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role,
        phone_number: Optional[str] = None,
        crew_id: Optional[str] = None,
        hourly_rate: Optional[Decimal] = None,
    ) -> CreateUserResult:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to create users")

        email = require_non_empty(email, "Email").lower()
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        if hourly_rate is not None and hourly_rate < 0:
            raise ValidationError("Hourly rate cannot be negative")

        auth_user = self._auth.admin_create_user(
            email=email,
            password=password,
            user_metadata={"first_name": first_name, "last_name": last_name},
        )
        LOGGER.info("auth_user_created", user_id=auth_user.id, role=role.value)

        # Second step is not atomic with the first: report a partial success instead of failing.
        try:
            profile = self._profiles.update(
                auth_user.id,
                {
                    "email": email,
                    "first_name": first_name,
                    "last_name": last_name,
                    "phone_number": optional_text(phone_number),
                    "role": role.value,
                    "crew_id": crew_id or None,
                    "hourly_rate": hourly_rate,
                    "updated_at": utc_now_iso(),
                },
            )
        except StoreError as e:
            LOGGER.error("profile_setup_failed", user_id=auth_user.id, code=e.code, error=str(e))
            return CreateUserResult(
                user_id=auth_user.id,
                profile=None,
                warning=f"User account created, but profile details could not be saved: {e}",
            )

        return CreateUserResult(user_id=auth_user.id, profile=profile)

    def update_user_profile(
        self,
        *,
        current_role: Role,
        user_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        role: Optional[Role] = None,
        crew_id: Optional[str] = None,
        hourly_rate: Optional[str] = None,
        clear_crew: bool = False,
        clear_hourly_rate: bool = False,
    ) -> Profile:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to edit users")

        changes: dict = {}
        if first_name is not None:
            changes["first_name"] = require_non_empty(first_name, "First name")
        if last_name is not None:
            changes["last_name"] = require_non_empty(last_name, "Last name")
        if phone_number is not None:
            changes["phone_number"] = optional_text(phone_number)
        if role is not None:
            changes["role"] = role.value
        if crew_id or clear_crew:
            changes["crew_id"] = crew_id or None
        if hourly_rate is not None or clear_hourly_rate:
            rate = optional_number(hourly_rate, "Hourly rate")
            if rate is not None and rate < 0:
                raise ValidationError("Hourly rate cannot be negative")
            changes["hourly_rate"] = rate

        if not changes:
            raise ValidationError("Nothing to update")

        changes["updated_at"] = utc_now_iso()
        profile = self._profiles.update(user_id, changes)
        LOGGER.info("profile_updated_by_admin", user_id=user_id, fields=sorted(changes))
        return profile


class ProfileService:
    """Use case: self-service profile settings (name and phone only)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def get_my_profile(self, user_id: Optional[str]) -> Optional[Profile]:
        if not user_id:
            return None
        return self._profiles.get_by_id(user_id)

    def update_my_profile(
        self,
        *,
        user_id: str,
        first_name: str,
        last_name: str,
        phone_number: Optional[str],
    ) -> Profile:
        if not user_id:
            raise AuthenticationError("Not authenticated")

        changes = {
            "first_name": require_non_empty(first_name, "First name"),
            "last_name": require_non_empty(last_name, "Last name"),
            "phone_number": optional_text(phone_number),
            "updated_at": utc_now_iso(),
        }
        return self._profiles.update(user_id, changes)
