"""
OrderDesk Backend - Abstract Email Provider Interface
=====================================================

What:  Contract for transactional email providers.
How:   Concrete providers inherit from EmailProvider and implement send().
Who:   NotificationSender.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    sender: str
    to: str
    subject: str
    html: str


class EmailProvider(ABC):
    """
    Transactional email provider.

    Contract:
        - send() dispatches exactly one message; it never retries
        - an accepted message returns the provider's message id
        - any rejection or transport fault raises UpstreamError (502), with
          the provider's error kept in the exception context only
    """

    @abstractmethod
    async def send(self, message: EmailMessage) -> str:
        ...

    async def aclose(self) -> None:
        """Releases provider resources (HTTP connections)."""
        return None
