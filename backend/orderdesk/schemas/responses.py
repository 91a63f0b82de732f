"""
OrderDesk Backend - Response Schemas
====================================

What:  Pydantic models describing the JSON bodies the API returns.
Who:   Route handlers (as response models) and the OpenAPI document.

Envelopes:
    Domain failures   {"success": false, "message": "..."}
    Login failures    {"message": "..."}
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Failure envelope shared by the export and notification endpoints."""

    success: bool = Field(default=False)
    message: str = Field(description="User-safe error description")


class LoginErrorResponse(BaseModel):
    """Failure envelope of the login endpoint."""

    message: str


class NotifyResponse(BaseModel):
    success: bool = True
    message: str = "Confirmation email sent"


class LoginResponse(BaseModel):
    """
    Successful login: the provider's user object and session, relayed as-is.

    `session` is the provider's token response minus `user`: access_token,
    refresh_token, expires_in, expires_at, token_type and any extra fields
    (provider_token, weak_password, ...) exactly as returned.
    """

    message: str = "Login successful"
    user: Optional[Dict[str, Any]] = None
    session: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
