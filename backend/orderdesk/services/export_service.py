"""
OrderDesk Backend - Order Exporter
==================================

What:  Exports one customer's orders as a CSV document.
Who:   Called by POST /functions/v1/export-csv.

Flow:
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Verify  │───▶│  Authorizer  │───▶│  View query  │───▶│  build   │
    │  token   │    │  (customer)  │    │  (scoped)    │    │  CSV     │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    DENIED        → AuthError 403 "Not allowed to export this customer"
    CHECK_FAILED  → UpstreamError 500 "Ownership check failed"
    query error   → UpstreamError 500 "Error fetching orders"
    zero rows     → NotFoundError 404 "No orders found for this customer"

The ownership check and the data query are two independent caller-scoped
transactions. Nothing is written.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from sqlalchemy import select

from orderdesk.database import Database
from orderdesk.exceptions import AuthError, NotFoundError, UpstreamError
from orderdesk.models import orders_with_customers
from orderdesk.security import Caller, CredentialVerifier
from orderdesk.services.authorizer import QUERY_ERRORS, AuthDecision, Authorizer, ResourceKind
from orderdesk.services.csv_export import build_csv, export_filename

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


@dataclass(frozen=True)
class CsvDocument:
    """A rendered export, ready to send as an attachment."""

    content: str
    filename: str
    row_count: int
    media_type: str = CSV_MEDIA_TYPE

    @property
    def content_disposition(self) -> str:
        return f"attachment; filename={self.filename}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderExporter:
    """Authorization-gated CSV export of a customer's orders."""

    def __init__(
        self,
        database: Database,
        authorizer: Authorizer,
        verifier: CredentialVerifier,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.database = database
        self.authorizer = authorizer
        self.verifier = verifier
        self.clock = clock

    async def export(self, customer_id: str, credential: str) -> CsvDocument:
        """
        Build the CSV export for `customer_id` on behalf of the bearer.

        Args:
            customer_id: Validated UUID v4 text.
            credential:  Raw bearer token.

        Raises:
            AuthError, UpstreamError, NotFoundError (see module docstring)
        """
        caller = self.verifier.verify(credential)

        decision = await self.authorizer.authorize(caller, customer_id, ResourceKind.CUSTOMER)
        if decision == AuthDecision.CHECK_FAILED:
            raise UpstreamError(
                message="Ownership check failed",
                context={"customer_id": customer_id},
            )
        if decision != AuthDecision.ALLOWED:
            logger.warning("User %s denied export of customer %s", caller.user_id, customer_id)
            raise AuthError(message="Not allowed to export this customer")

        rows = await self._fetch_rows(caller, customer_id)
        if not rows:
            raise NotFoundError(message="No orders found for this customer")

        document = CsvDocument(
            content=build_csv(rows),
            filename=export_filename(customer_id, self.clock()),
            row_count=len(rows),
        )
        logger.info("Exported %d orders for customer %s", document.row_count, customer_id)
        return document

    async def _fetch_rows(self, caller: Caller, customer_id: str) -> List[Dict[str, Any]]:
        view = orders_with_customers
        query = select(*view.columns).where(view.c.customer_id == uuid.UUID(customer_id))
        try:
            async with self.database.caller_scope(caller) as session:
                result = await session.execute(query)
                return [dict(row) for row in result.mappings().all()]
        except QUERY_ERRORS as e:
            raise UpstreamError(
                message="Error fetching orders",
                context={"customer_id": customer_id, "error": str(e)},
            )
