"""
OrderDesk Backend - Order SQLAlchemy Model and Export View
==========================================================

What:  ORM mapping of the `orders` table plus a Core description of the
       `view_orders_with_customers` view used by the CSV export.
Who:   Order → Authorizer (ownership join); view → Order Exporter.

Ownership is transitive: an order belongs to one customer, and the
customer's `user_id` is the order's effective owner.

The view is declared `security_invoker`, so selecting from it applies the
caller's row-level policies on both underlying tables. Column order here is
the CSV header order.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, ForeignKey, MetaData, Numeric, String, Table, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.database import Base


class Order(Base):
    """A customer order."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("customers.id"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, customer_id={self.customer_id}, status='{self.status}')>"


# Views live in their own MetaData so nothing ever tries to CREATE them.
view_metadata = MetaData()

orders_with_customers = Table(
    "view_orders_with_customers",
    view_metadata,
    Column("order_id", UUID(as_uuid=True)),
    Column("customer_id", UUID(as_uuid=True)),
    Column("status", String(50)),
    Column("total_amount", Numeric(12, 2)),
    Column("order_created_at", TIMESTAMP(timezone=True)),
    Column("order_date_formatted", Text),
    Column("customer_name", String(255)),
    Column("customer_email", Text),
)
