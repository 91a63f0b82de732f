# Models package init
"""
OrderDesk Backend - ORM Models
==============================

Read-only mappings of the store's tables and the export view. The schema is
owned and migrated by the store; nothing here creates or alters tables.
"""

from orderdesk.models.customer import Customer
from orderdesk.models.order import Order, orders_with_customers

__all__ = ["Customer", "Order", "orders_with_customers"]
