"""
OrderDesk Backend - Customer SQLAlchemy Model
=============================================

What:  ORM mapping of the `customers` table.
Who:   Queried by the Authorizer (customer visibility, order → customer join).

Ownership:
    Every customer row is owned by exactly one identity-provider user
    (`user_id`). The store's row-level policy only exposes rows whose
    `user_id` equals `auth.uid()` of the caller.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.database import Base


class Customer(Base):
    """A business customer owned by one authenticated user."""

    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)

    # Owning identity-provider user (auth.users.id)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, user_id={self.user_id})>"
