"""
OrderDesk Backend - Caller Credentials
======================================

What:  Turns a bearer token into a verified `Caller` (user id + claims).
How:   python-jose decodes the identity provider's HS256 JWT with the
       project's JWT secret, checking signature, expiry and audience.
Who:   Used by the database layer before it opens a caller-scoped transaction.

The verified claims are what the store's row-level policies see through
`request.jwt.claims`; nothing here decides ownership. This module never
mints tokens.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from jose import JWTError, jwt

from orderdesk.exceptions import AuthError

logger = logging.getLogger(__name__)

JWT_ALGORITHMS = ["HS256"]


@dataclass(frozen=True)
class Caller:
    """An authenticated principal, as proven by a verified bearer token."""

    token: str = field(repr=False)
    user_id: str
    claims: Dict[str, Any] = field(repr=False)

    @property
    def role(self) -> str:
        return str(self.claims.get("role") or "authenticated")


class CredentialVerifier:
    """Verifies bearer tokens issued by the identity provider."""

    def __init__(self, jwt_secret: str, audience: str = "authenticated"):
        self._secret = jwt_secret
        self._audience = audience

    def verify(self, token: str) -> Caller:
        """
        Decode and validate a bearer token.

        Returns:
            Caller whose `user_id` is the token's `sub` claim.

        Raises:
            AuthError (403) when the token is malformed, expired, signed with
            another key, issued for another audience, or has no subject.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=JWT_ALGORITHMS,
                audience=self._audience,
            )
        except JWTError as e:
            logger.warning("Rejected bearer token: %s", str(e))
            raise AuthError(message="Invalid or expired token", context={"reason": str(e)})

        subject = claims.get("sub")
        if not subject:
            raise AuthError(message="Invalid or expired token", context={"reason": "missing sub"})

        return Caller(token=token, user_id=str(subject), claims=claims)
