"""
OrderDesk Backend - Identity Gateway
====================================

What:  Exchanges an email/password pair for a session at the identity provider.
How:   Supabase Auth password grant over httpx:
           POST {SUPABASE_URL}/auth/v1/token?grant_type=password
           apikey: {SUPABASE_ANON_KEY}
           {"email": ..., "password": ...}
       The provider's user object is split out; every other field of the
       token response is relayed verbatim as the session.
Who:   Called by POST /functions/v1/auth-login. Bypasses the Authorizer.

Failure mapping:
    provider 4xx        → AuthError 401 "Invalid credentials"
                          (provider reason logged at WARNING, never returned)
    provider 5xx / I/O  → UpstreamError 500
    missing config      → ConfigError 500
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from orderdesk.exceptions import AuthError, ConfigError, UpstreamError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class LoginResult:
    user: Optional[Dict[str, Any]]
    session: Dict[str, Any] = field(repr=False)


def _provider_reason(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)


class IdentityGateway:
    """Client for the identity provider's password grant."""

    def __init__(
        self,
        supabase_url: str,
        anon_key: str,
        client: Optional[httpx.AsyncClient] = None,
    ):
        missing = [
            name
            for name, value in (("SUPABASE_URL", supabase_url), ("SUPABASE_ANON_KEY", anon_key))
            if not value
        ]
        if missing:
            raise ConfigError(
                message="Configuration validation failed: missing " + ", ".join(missing),
                context={"missing": missing},
            )
        self._token_url = f"{supabase_url.rstrip('/')}/auth/v1/token"
        self._anon_key = anon_key
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate with the identity provider.

        Args:
            email:    Already trimmed, non-empty.
            password: Non-empty, passed through untouched.
        """
        try:
            response = await self._client.post(
                self._token_url,
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers={"apikey": self._anon_key, "Authorization": f"Bearer {self._anon_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("Identity provider unreachable: %s", str(e))
            raise UpstreamError(context={"error_type": type(e).__name__, "error": str(e)})

        if response.is_client_error:
            logger.warning("Authentication error: %s", _provider_reason(response))
            raise AuthError(message="Invalid credentials", status_code=401)

        if response.is_error:
            logger.error(
                "Identity provider error (%d): %s",
                response.status_code,
                _provider_reason(response),
            )
            raise UpstreamError(context={"status": response.status_code})

        try:
            body = response.json()
        except ValueError:
            raise UpstreamError(context={"status": response.status_code, "error": "non-JSON body"})
        if not isinstance(body, dict) or not body.get("access_token"):
            raise UpstreamError(context={"status": response.status_code, "error": "no session returned"})

        logger.info("Login successful for %s", email)
        return LoginResult(
            user=body.get("user"),
            session={key: value for key, value in body.items() if key != "user"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
