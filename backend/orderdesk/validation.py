"""
OrderDesk Backend - Request Validator
=====================================

What:  Shared checks that run before any domain logic: bearer extraction,
       JSON body parsing, field syntax (email, UUID v4) and payload-schema
       validation with endpoint-specific status codes.
Who:   Route handlers and the request schemas.

Every failure here is an InputError or AuthError raised before any database
or provider call is made.
"""

import json
import re
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from orderdesk.exceptions import AuthError, InputError

# local@domain.tld with no whitespace and exactly one "@" per side
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# 8-4-4-4-12 hex, version nibble 4, variant nibble 8/9/a/b
UUID_V4_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

BEARER_PREFIX = "bearer "

ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_text(value: Any) -> str:
    """Text form of a JSON field: missing, null, false, 0 and "" all become ""."""
    if value is None or value is False or value == "" or value == 0:
        return ""
    if value is True:
        return "true"
    return str(value).strip()


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def is_uuid_v4(value: str) -> bool:
    return bool(UUID_V4_RE.match(value))


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """
    Token from an `Authorization: Bearer <token>` header.

    The prefix match is case-insensitive. Returns None when the header is
    absent, uses another scheme, or carries an empty token.
    """
    header = authorization or ""
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):]
    return token or None


def require_bearer(authorization: Optional[str]) -> str:
    """Like extract_bearer, but a missing token is a 403 AuthError."""
    token = extract_bearer(authorization)
    if token is None:
        raise AuthError(message="Missing Authorization Bearer token")
    return token


async def read_json_object(request: Request, invalid_message: str = "Invalid JSON format") -> Dict[str, Any]:
    """
    Parse the request body as JSON.

    Raises InputError (400) when the body is not valid JSON. A valid JSON
    value that is not an object is treated as an empty object, so the
    field-level checks report what is missing.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InputError(message=invalid_message, context={"body_length": len(raw)})
    if not isinstance(payload, dict):
        return {}
    return payload


def validate_payload(schema: Type[ModelT], payload: Dict[str, Any], status_code: int = 400) -> ModelT:
    """
    Validate a parsed body against a request schema.

    The first schema error (in field order) becomes the InputError message,
    raised with the endpoint's status code (400 or 422).
    """
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InputError(message=first["msg"], field=field, status_code=status_code)
