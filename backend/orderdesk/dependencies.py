"""
OrderDesk Backend - Route Dependencies
======================================

What:  FastAPI dependencies shared by the handler routes.
How:   Process-wide services live on `app.state`, put
       there by the application factory; the getters below read them back
       per request. The guards run in declaration order, which gives the
       handlers their check order: origin → bearer → body.
Who:   routes/auth.py, routes/export.py, routes/notify.py.
"""

from typing import Any, Optional

from fastapi import Header, Request

from orderdesk.exceptions import AuthError, ConfigError
from orderdesk.middleware.cors import origin_allowed
from orderdesk.services.export_service import OrderExporter
from orderdesk.services.identity_service import IdentityGateway
from orderdesk.services.notification_service import NotificationSender
from orderdesk.validation import require_bearer


def _state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise ConfigError(
            message=f"{name} is not configured",
            context={"missing": request.app.state.missing_config},
        )
    return value


def get_exporter(request: Request) -> OrderExporter:
    return _state(request, "exporter")


def get_sender(request: Request) -> NotificationSender:
    return _state(request, "sender")


def get_identity_gateway(request: Request) -> IdentityGateway:
    return _state(request, "identity")


# ── Guards ────────────────────────────────────────────────────────────────

async def require_allowed_origin(request: Request) -> Optional[str]:
    """
    Rejects requests whose Origin is not allow-listed.

    Raises:
        AuthError (403) "Origin not allowed"
    """
    origin = request.headers.get("origin")
    if not origin_allowed(origin, request.app.state.settings.allowed_origins_list):
        raise AuthError(message="Origin not allowed", context={"origin": origin})
    return origin


async def require_bearer_token(
    authorization: Optional[str] = Header(default=None),
) -> str:
    """Raw bearer token; 403 when absent or empty."""
    return require_bearer(authorization)
