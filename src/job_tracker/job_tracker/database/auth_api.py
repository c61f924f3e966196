"""Thin wrapper over the auth provider's REST API (GoTrue)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
import structlog

from ..core.exceptions import AuthenticationError, StoreError
from .connection import SupabaseConnection

LOGGER = structlog.get_logger(__name__)

AUTH_PREFIX = "/auth/v1"


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    user: AuthUser


def _user_from(payload: Dict[str, Any]) -> AuthUser:
    return AuthUser(id=str(payload["id"]), email=str(payload.get("email") or ""))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if not isinstance(body, dict):
        return response.text
    return str(
        body.get("error_description")
        or body.get("msg")
        or body.get("message")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )


class SupabaseAuthClient:
    def __init__(self, conn_factory: SupabaseConnection):
        self._conn_factory = conn_factory

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        with self._conn_factory.connect() as client:
            try:
                response = client.post(
                    f"{AUTH_PREFIX}/token",
                    params={"grant_type": "password"},
                    json={"email": email, "password": password},
                )
            except httpx.HTTPError as e:
                raise StoreError(f"Auth service unreachable: {e}") from e

        if response.status_code in (400, 401, 422):
            LOGGER.info("sign_in_rejected", email=email, status_code=response.status_code)
            raise AuthenticationError("Invalid email or password")
        if not response.is_success:
            raise StoreError(_error_message(response), status_code=response.status_code)

        body = response.json()
        return AuthSession(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            user=_user_from(body["user"]),
        )

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        with self._conn_factory.connect(access_token=access_token) as client:
            try:
                response = client.get(f"{AUTH_PREFIX}/user")
            except httpx.HTTPError as e:
                raise StoreError(f"Auth service unreachable: {e}") from e

        if response.status_code in (401, 403):
            return None
        if not response.is_success:
            raise StoreError(_error_message(response), status_code=response.status_code)
        return _user_from(response.json())

    def sign_out(self, access_token: str) -> None:
        with self._conn_factory.connect(access_token=access_token) as client:
            try:
                client.post(f"{AUTH_PREFIX}/logout")
            except httpx.HTTPError as e:
                # The local session is dropped regardless.
                LOGGER.warning("sign_out_failed", error=str(e))

    def admin_create_user(self, *, email: str, password: str, user_metadata: Optional[dict] = None) -> AuthUser:
        with self._conn_factory.connect_admin() as client:
            try:
                response = client.post(
                    f"{AUTH_PREFIX}/admin/users",
                    json={
                        "email": email,
                        "password": password,
                        "email_confirm": True,
                        "user_metadata": user_metadata or {},
                    },
                )
            except httpx.HTTPError as e:
                raise StoreError(f"Auth service unreachable: {e}") from e

        if not response.is_success:
            message = _error_message(response)
            LOGGER.error("admin_create_user_failed", email=email, status_code=response.status_code, message=message)
            raise StoreError(message, status_code=response.status_code)
        return _user_from(response.json())
