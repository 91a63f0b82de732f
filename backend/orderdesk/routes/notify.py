"""
OrderDesk Backend - Notification Route Handler
==============================================

What:  POST /functions/v1/send-confirmation-email.
How:   Guards (origin, bearer), JSON body, email + orderId checks (400), then
       NotificationSender. Invalid input never reaches the email provider.
"""

from fastapi import APIRouter, Depends, Request

from orderdesk.dependencies import get_sender, require_allowed_origin, require_bearer_token
from orderdesk.routes import FUNCTIONS_PREFIX
from orderdesk.schemas.requests import NotifyRequest
from orderdesk.schemas.responses import ErrorResponse, NotifyResponse
from orderdesk.services.notification_service import NotificationSender
from orderdesk.validation import read_json_object, validate_payload

router = APIRouter(prefix=FUNCTIONS_PREFIX, tags=["Notifications"])


@router.post(
    "/send-confirmation-email",
    response_model=NotifyResponse,
    responses={
        400: {"description": "Invalid JSON, email or orderId", "model": ErrorResponse},
        403: {"description": "Origin, credential or ownership rejected", "model": ErrorResponse},
        500: {"description": "Ownership check failed", "model": ErrorResponse},
        502: {"description": "Email provider failure", "model": ErrorResponse},
    },
    summary="Send the order confirmation email",
    dependencies=[Depends(require_allowed_origin)],
)
async def send_confirmation_email(
    request: Request,
    token: str = Depends(require_bearer_token),
    sender: NotificationSender = Depends(get_sender),
) -> NotifyResponse:
    payload = await read_json_object(request, invalid_message="Invalid JSON")
    body = validate_payload(NotifyRequest, payload)

    await sender.notify(body.email, body.order_id, token)
    return NotifyResponse()
