"""
OrderDesk Backend - Login Route Handler
=======================================

What:  POST /functions/v1/auth-login, email/password → provider session.
Who:   Browser login form.

Unlike the other handlers this one takes no bearer token and its failure
body is `{"message": ...}` (no `success` flag; see main.py).
"""

from fastapi import APIRouter, Depends, Request

from orderdesk.dependencies import get_identity_gateway, require_allowed_origin
from orderdesk.routes import FUNCTIONS_PREFIX
from orderdesk.schemas.requests import LoginRequest
from orderdesk.schemas.responses import LoginErrorResponse, LoginResponse
from orderdesk.services.identity_service import IdentityGateway
from orderdesk.validation import read_json_object, validate_payload

LOGIN_PATH = "/auth-login"

router = APIRouter(prefix=FUNCTIONS_PREFIX, tags=["Auth"])


@router.post(
    LOGIN_PATH,
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid JSON or missing credentials", "model": LoginErrorResponse},
        401: {"description": "Credentials rejected", "model": LoginErrorResponse},
        500: {"description": "Identity provider unavailable", "model": LoginErrorResponse},
    },
    summary="Log in with email and password",
    dependencies=[Depends(require_allowed_origin)],
)
async def auth_login(
    request: Request,
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> LoginResponse:
    payload = await read_json_object(request, invalid_message="Invalid JSON format")
    body = validate_payload(LoginRequest, payload)

    result = await gateway.login(body.email, body.password)
    return LoginResponse(user=result.user, session=result.session)
