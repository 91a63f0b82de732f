"""
OrderDesk Backend - Authorizer
==============================

What:  Decides whether a caller owns a customer or an order.
How:   Ownership is delegated to the store's row-level policy. Each check is
       one query inside a caller-scoped transaction (Database.caller_scope):
       a customer is owned iff it is visible to the caller; an order is owned
       iff the order → customer join yields a row whose customer belongs to
       the caller.
Who:   OrderExporter (customer) and NotificationSender (order).

Decisions:
    ALLOWED       caller owns the resource
    DENIED        zero matching rows                   → 403
    CHECK_FAILED  the ownership query itself failed    → 500 (fail closed)

No decision is cached; every request re-verifies.
"""

import asyncio
import enum
import logging
import uuid
from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from orderdesk.database import Database
from orderdesk.models import Customer, Order
from orderdesk.security import Caller

logger = logging.getLogger(__name__)

# Driver-level faults (refused connection, DNS, timeout) reach us unwrapped.
QUERY_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class AuthDecision(str, enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    CHECK_FAILED = "check_failed"


class ResourceKind(str, enum.Enum):
    CUSTOMER = "customer"
    ORDER = "order"


class Authorizer(ABC):
    """
    Ownership check contract.

    Implementations never raise for a failed query; they report
    CHECK_FAILED so callers can tell "not yours" apart from "could not tell".
    """

    @abstractmethod
    async def authorize(self, caller: Caller, resource_id: str, resource_kind: ResourceKind) -> AuthDecision:
        ...


class RowLevelAuthorizer(Authorizer):
    """Authorizer backed by the store's row-level security policies."""

    def __init__(self, database: Database):
        self.database = database

    async def authorize(self, caller: Caller, resource_id: str, resource_kind: ResourceKind) -> AuthDecision:
        try:
            if resource_kind == ResourceKind.CUSTOMER:
                allowed = await self._customer_visible(caller, resource_id)
            elif resource_kind == ResourceKind.ORDER:
                allowed = await self._order_owned(caller, resource_id)
            else:
                raise ValueError(f"Unknown resource kind: {resource_kind!r}")
        except QUERY_ERRORS as e:
            logger.error(
                "Ownership check failed for %s %s: %s",
                resource_kind.value,
                resource_id,
                str(e),
            )
            return AuthDecision.CHECK_FAILED

        decision = AuthDecision.ALLOWED if allowed else AuthDecision.DENIED
        logger.debug(
            "Ownership of %s %s for user %s: %s",
            resource_kind.value,
            resource_id,
            caller.user_id,
            decision.value,
        )
        return decision

    async def _customer_visible(self, caller: Caller, customer_id: str) -> bool:
        # SELECT id FROM customers WHERE id = :customer_id LIMIT 1
        # The policy already restricts rows to customers.user_id = auth.uid().
        async with self.database.caller_scope(caller) as session:
            result = await session.execute(
                select(Customer.id).where(Customer.id == uuid.UUID(customer_id)).limit(1)
            )
            return result.first() is not None

    async def _order_owned(self, caller: Caller, order_id: str) -> bool:
        try:
            owner = uuid.UUID(caller.user_id)
        except ValueError:
            return False

        # SELECT o.id, c.user_id FROM orders o
        # JOIN customers c ON c.id = o.customer_id
        # WHERE o.id = :order_id AND c.user_id = auth.uid()
        async with self.database.caller_scope(caller) as session:
            result = await session.execute(
                select(Order.id, Customer.user_id)
                .join(Customer, Customer.id == Order.customer_id)
                .where(Order.id == uuid.UUID(order_id), Customer.user_id == owner)
                .limit(1)
            )
            rows = result.all()
        return len(rows) == 1 and rows[0].user_id is not None
