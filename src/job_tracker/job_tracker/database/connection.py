from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import httpx

TokenProvider = Callable[[], Optional[str]]


@dataclass
class SupabaseConfig:
    url: str
    anon_key: str
    service_role_key: str = ""
    timeout: float = 30.0


class SupabaseConnection:
    """HTTP client factory for the managed backend, one per container.

    Note: We create short-lived clients per operation. Requests carry the signed-in
    user's access token (when the token provider returns one) so row-level security
    applies exactly as it would for the browser.
    """

    def __init__(
        self,
        config: SupabaseConfig,
        *,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._config = config
        self._token_provider = token_provider or (lambda: None)
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._config.url.rstrip("/")

    def _client(self, bearer: str) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers={
                "apikey": self._config.anon_key,
                "Authorization": f"Bearer {bearer}",
            },
            timeout=self._config.timeout,
            transport=self._transport,
        )

    def connect(self, *, access_token: Optional[str] = None) -> httpx.Client:
        token = access_token or self._token_provider() or self._config.anon_key
        return self._client(token)

    def connect_admin(self) -> httpx.Client:
        if not self._config.service_role_key:
            raise RuntimeError("SUPABASE_SERVICE_ROLE_KEY is not configured")
        client = self._client(self._config.service_role_key)
        client.headers["apikey"] = self._config.service_role_key
        return client
