from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.formatting import format_user_greeting, full_name
from ..core.enums import Role


@dataclass(frozen=True)
class CrewRef:
    id: str
    name: str


@dataclass(frozen=True)
class Profile:
    """Domain entity: the application profile behind an auth user.

    The id is the auth provider's user id.
    """

    id: str
    email: str
    first_name: str
    last_name: str
    role: Role
    phone_number: Optional[str] = None
    crew_id: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    crew: Optional[CrewRef] = None

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name, default=self.email or "Unknown")

    @property
    def greeting(self) -> str:
        return format_user_greeting(self.first_name, self.last_name)

    @property
    def crew_name(self) -> Optional[str]:
        return self.crew.name if self.crew else None


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    email: str
    full_name: str
    role: Role
    crew_id: Optional[str]
    access_token: str
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class CreateUserResult:
    user_id: str
    profile: Optional[Profile]
    warning: Optional[str] = None
