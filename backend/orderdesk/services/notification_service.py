"""
OrderDesk Backend - Notification Sender
=======================================

What:  Sends the order-confirmation email for an order the caller owns.
Who:   Called by POST /functions/v1/send-confirmation-email after the request
       body has been validated.

Flow:
    1. Verify the bearer token.
    2. Authorizer(order): DENIED → 403, CHECK_FAILED → 500.
    3. Render the fixed HTML template with the order id.
    4. One send through the EmailProvider; failures → 502, never retried.

No state is recorded on success.
"""

import html
import logging

from orderdesk.exceptions import AuthError, UpstreamError
from orderdesk.security import CredentialVerifier
from orderdesk.services.authorizer import AuthDecision, Authorizer, ResourceKind
from orderdesk.services.email_base import EmailMessage, EmailProvider

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Your order has been confirmed!"


def build_confirmation_html(order_id: str) -> str:
    order = html.escape(order_id)
    return f"""
  <div style="font-family: Arial, sans-serif; max-width: 600px; margin: auto;">
    <h2 style="color: #1a73e8;">Order Confirmed!</h2>
    <p>Hello! Thank you for shopping with us.</p>
    <p>Your order <strong>#{order}</strong> has been confirmed.</p>
    <p>You will receive email updates as soon as it ships.</p>
    <hr style="border: none; border-top: 1px solid #ddd; margin: 20px 0;" />
    <p style="font-size: 12px; color: #888;">This is an automated email. Please do not reply.</p>
  </div>"""


class NotificationSender:
    """Ownership-checked confirmation emails."""

    def __init__(
        self,
        authorizer: Authorizer,
        verifier: CredentialVerifier,
        provider: EmailProvider,
        sender_address: str,
    ):
        self.authorizer = authorizer
        self.verifier = verifier
        self.provider = provider
        self.sender_address = sender_address

    async def notify(self, email: str, order_id: str, credential: str) -> str:
        """
        Send the confirmation for `order_id` to `email`.

        Returns:
            The provider's message id.

        Raises:
            AuthError (403), UpstreamError (500 on a failed ownership check,
            502 on a provider failure).
        """
        caller = self.verifier.verify(credential)

        decision = await self.authorizer.authorize(caller, order_id, ResourceKind.ORDER)
        if decision == AuthDecision.CHECK_FAILED:
            raise UpstreamError(message="Internal error", context={"order_id": order_id})
        if decision != AuthDecision.ALLOWED:
            logger.warning("User %s denied notification for order %s", caller.user_id, order_id)
            raise AuthError(message="Not allowed to notify this order")

        message_id = await self.provider.send(
            EmailMessage(
                sender=self.sender_address,
                to=email,
                subject=CONFIRMATION_SUBJECT,
                html=build_confirmation_html(order_id),
            )
        )
        logger.info("Confirmation for order %s sent to %s (id=%s)", order_id, email, message_id)
        return message_id
