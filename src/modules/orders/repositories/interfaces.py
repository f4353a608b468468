"""Order repository interface.

Extends ``IRepository[Order]`` with the operations used by order
placement (header and line-item inserts) and the annotated read side.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    Reads return orders annotated with ``total_cents`` and ``item_count``
    and with line items (and their products) prefetched.
    """

    @abstractmethod
    def create(self) -> Order:
        """Insert an empty order header."""

    @abstractmethod
    def add_item(
        self,
        order: Order,
        product_id: int,
        quantity: int,
        unit_price_cents: int,
    ) -> OrderItem:
        """Insert one line item with a price snapshot."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an annotated order with prefetched items."""

    @abstractmethod
    def list(self) -> "QuerySet[Order]":
        """All orders, newest first."""
