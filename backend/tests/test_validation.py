"""
OrderDesk Backend - Request Validator Unit Tests
================================================

What we test:
    ✅ Email and UUID v4 syntax rules
    ✅ Bearer extraction (case-insensitive prefix, empty token)
    ✅ Request schemas: trimming, coercion, messages, field order
    ✅ Status code passed through validate_payload
"""

import pytest

from orderdesk.exceptions import AuthError, InputError
from orderdesk.schemas.requests import ExportRequest, LoginRequest, NotifyRequest
from orderdesk.validation import (
    coerce_text,
    extract_bearer,
    is_email,
    is_uuid_v4,
    require_bearer,
    validate_payload,
)

from conftest import CUSTOMER_ID, ORDER_ID


class TestFieldRules:

    @pytest.mark.parametrize("value", ["ana@example.com", "a.b+c@sub.example.co"])
    def test_valid_emails(self, value):
        assert is_email(value)

    @pytest.mark.parametrize("value", ["", "ana", "ana@example", "an a@example.com", "a@b@c.com"])
    def test_invalid_emails(self, value):
        assert not is_email(value)

    def test_uuid_v4_is_case_insensitive(self):
        assert is_uuid_v4(CUSTOMER_ID)
        assert is_uuid_v4(CUSTOMER_ID.upper())

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "not-a-uuid",
            "3f2b8c1a-7d4e-1f6a-9b0c-2d1e3f4a5b6c",  # version 1
            "3f2b8c1a-7d4e-4f6a-7b0c-2d1e3f4a5b6c",  # bad variant
            "3f2b8c1a7d4e4f6a9b0c2d1e3f4a5b6c",
        ],
    )
    def test_rejects_non_v4_identifiers(self, value):
        assert not is_uuid_v4(value)

    def test_coerce_text(self):
        assert coerce_text(None) == ""
        assert coerce_text(0) == ""
        assert coerce_text(False) == ""
        assert coerce_text("  x  ") == "x"
        assert coerce_text(42) == "42"


class TestBearer:

    def test_prefix_is_case_insensitive(self):
        assert extract_bearer("bearer abc") == "abc"
        assert extract_bearer("BEARER abc") == "abc"

    def test_missing_or_empty_token(self):
        assert extract_bearer(None) is None
        assert extract_bearer("Bearer ") is None
        assert extract_bearer("Basic dXNlcjpwYXNz") is None

    def test_require_bearer_raises_403(self):
        with pytest.raises(AuthError) as exc_info:
            require_bearer("")
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Missing Authorization Bearer token"


class TestSchemas:

    def test_export_request_trims_identifier(self):
        body = validate_payload(ExportRequest, {"customerId": f"  {CUSTOMER_ID} "}, status_code=422)
        assert body.customer_id == CUSTOMER_ID

    def test_export_request_missing_id_is_422(self):
        with pytest.raises(InputError) as exc_info:
            validate_payload(ExportRequest, {}, status_code=422)
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Invalid customerId (UUID v4 expected)"

    def test_export_request_null_id_is_rejected(self):
        with pytest.raises(InputError):
            validate_payload(ExportRequest, {"customerId": None}, status_code=422)

    def test_notify_reports_email_first(self):
        with pytest.raises(InputError) as exc_info:
            validate_payload(NotifyRequest, {"email": "nope", "orderId": "nope"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid email"

    def test_notify_invalid_order_id(self):
        with pytest.raises(InputError) as exc_info:
            validate_payload(NotifyRequest, {"email": "ana@example.com", "orderId": 12})
        assert exc_info.value.message == "Invalid orderId (must be UUID v4)"

    def test_notify_valid(self):
        body = validate_payload(NotifyRequest, {"email": " ana@example.com ", "orderId": ORDER_ID})
        assert body.email == "ana@example.com"
        assert body.order_id == ORDER_ID

    def test_login_requires_both_fields(self):
        with pytest.raises(InputError) as exc_info:
            validate_payload(LoginRequest, {"email": "   ", "password": "secret"})
        assert exc_info.value.message == "Email and password are required"

    def test_login_keeps_password_untrimmed(self):
        body = validate_payload(LoginRequest, {"email": " ana@example.com", "password": " pw "})
        assert body.email == "ana@example.com"
        assert body.password == " pw "

    def test_login_non_string_password_is_missing(self):
        with pytest.raises(InputError):
            validate_payload(LoginRequest, {"email": "ana@example.com", "password": 1234})
