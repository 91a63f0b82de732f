"""
OrderDesk Backend - CORS Middleware
===================================

What:  Allow-list CORS for the browser clients of the handler endpoints.
How:   OPTIONS preflights are answered here (200, empty body) and never reach
       routing. Every other response gets the same CORS headers stamped on
       the way out. Rejecting a disallowed Origin is not done here; that is
       the `require_allowed_origin` dependency (403 before domain logic).
Who:   Applied to every request; `cors_headers()` is also used by the
       catch-all exception handler, whose response bypasses middleware.

Headers:
    Access-Control-Allow-Origin   "*" when the list holds "*", else the request
                                  Origin if allow-listed, otherwise "null"
    Access-Control-Allow-Headers  authorization, x-client-info, apikey, content-type
    Access-Control-Allow-Methods  POST, OPTIONS
    Vary                          Origin
"""

from typing import Dict, Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

WILDCARD = "*"
ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
ALLOW_METHODS = "POST, OPTIONS"


def origin_allowed(origin: Optional[str], allowed_origins: Sequence[str]) -> bool:
    """True when the list is wildcarded or holds `origin` exactly."""
    if WILDCARD in allowed_origins:
        return True
    return bool(origin) and origin in allowed_origins


def pick_origin(origin: Optional[str], allowed_origins: Sequence[str]) -> str:
    """Value for Access-Control-Allow-Origin."""
    if WILDCARD in allowed_origins:
        return WILDCARD
    if origin and origin in allowed_origins:
        return origin
    return "null"


def cors_headers(origin: Optional[str], allowed_origins: Sequence[str]) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": pick_origin(origin, allowed_origins),
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Vary": "Origin",
    }


class OriginCORSMiddleware(BaseHTTPMiddleware):
    """Answers preflights and decorates responses with CORS headers."""

    def __init__(self, app: ASGIApp, allowed_origins: Sequence[str]):
        super().__init__(app)
        self.allowed_origins = list(allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        headers = cors_headers(request.headers.get("origin"), self.allowed_origins)

        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
