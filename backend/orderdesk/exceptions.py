"""
OrderDesk Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure a handler can report.
How:   Each exception carries a user-safe message, an HTTP status code and an
       optional context dict. Global exception handlers (registered in
       main.py) turn them into the `{success: false, message}` envelope.
Who:   Raised by validators, services and dependencies; caught by handlers.

Exception Hierarchy:
    OrderDeskError (base)
    ├── InputError              → 400 / 422 (malformed or missing fields)
    ├── AuthError               → 401 / 403 (credential, origin, ownership)
    ├── MethodNotAllowedError   → 405
    ├── NotFoundError           → 404 (no matching rows)
    ├── UpstreamError           → 500 / 502 (database or provider failure)
    └── ConfigError             → 500 (missing required configuration)

Input and auth errors are detected before any external call and their message
is returned verbatim. Upstream and config errors are logged with their
context server-side; the caller only sees a generic message.
"""

from typing import Any, Dict, Optional


class OrderDeskError(Exception):
    """
    Base exception for all OrderDesk application errors.

    Attributes:
        message:     User-facing error description (safe to return)
        status_code: HTTP status the global handler responds with
        context:     Additional debug info (logged, never returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)


class InputError(OrderDeskError):
    """
    Raised when client input fails validation.

    HTTP: 400 for unparsable bodies and invalid fields on most endpoints,
          422 when the JSON is well-formed but an identifier is malformed
          (export endpoint).
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, status_code=status_code, context=ctx)
        self.field = field


class AuthError(OrderDeskError):
    """
    Raised when the caller may not proceed.

    When:  Origin not allow-listed, bearer token missing or invalid, ownership
           denied (403); identity provider rejected the credentials (401).
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=status_code, context=context)


class MethodNotAllowedError(OrderDeskError):
    """Raised for any method other than POST on a handler endpoint."""

    status_code = 405

    def __init__(self, message: str = "Method Not Allowed", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class NotFoundError(OrderDeskError):
    """
    Raised when a query legitimately matched zero rows.

    Distinct from AuthError: a caller may own a customer that has no orders.
    """

    status_code = 404

    def __init__(self, message: str = "Not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class UpstreamError(OrderDeskError):
    """
    Raised when the database, identity provider or email provider fails.

    HTTP: 500 for database and identity-provider faults, 502 when the email
          provider rejects or cannot accept a send.

    The message is generic; provider error text belongs in `context` so it is
    logged but never echoed to the caller.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal error",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=status_code, context=context)


class ConfigError(OrderDeskError):
    """
    Raised when required configuration is missing.

    Fatal at startup. If it surfaces during a request the caller gets a
    generic internal-error message; the missing variable names are logged.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Required configuration is missing",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
