"""
OrderDesk Backend - Request Schemas
===================================

What:  Pydantic models for the three POST bodies.
How:   `mode="before"` validators coerce each field to trimmed text (missing
       or null → "") and then apply the field rule, raising
       PydanticCustomError so the message reaches the client unprefixed.
Who:   Routes, through orderdesk.validation.validate_payload.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from orderdesk.validation import coerce_text, is_email, is_uuid_v4


class LoginRequest(BaseModel):
    """Body of POST /auth-login."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> str:
        return v.strip() if isinstance(v, str) else ""

    @field_validator("password", mode="before")
    @classmethod
    def keep_password(cls, v: Any) -> str:
        # Passwords are never trimmed
        return v if isinstance(v, str) else ""

    @model_validator(mode="after")
    def require_both(self) -> "LoginRequest":
        if not self.email or not self.password:
            raise PydanticCustomError("missing_credentials", "Email and password are required")
        return self


class ExportRequest(BaseModel):
    """Body of POST /export-csv."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(default="", alias="customerId", validate_default=True)

    @field_validator("customer_id", mode="before")
    @classmethod
    def validate_customer_id(cls, v: Any) -> str:
        value = coerce_text(v)
        if not is_uuid_v4(value):
            raise PydanticCustomError("invalid_uuid", "Invalid customerId (UUID v4 expected)")
        return value


class NotifyRequest(BaseModel):
    """Body of POST /send-confirmation-email."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(default="", validate_default=True)
    order_id: str = Field(default="", alias="orderId", validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        value = coerce_text(v)
        if not is_email(value):
            raise PydanticCustomError("invalid_email", "Invalid email")
        return value

    @field_validator("order_id", mode="before")
    @classmethod
    def validate_order_id(cls, v: Any) -> str:
        value = coerce_text(v)
        if not is_uuid_v4(value):
            raise PydanticCustomError("invalid_uuid", "Invalid orderId (must be UUID v4)")
        return value
