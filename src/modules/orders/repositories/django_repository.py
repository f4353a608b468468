"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Writes are
expected to run inside the transaction opened by ``OrderService``.

``total_cents`` and ``item_count`` are computed in SQL rather than
stored, so they always agree with the line items.
"""

from __future__ import annotations

from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import BigIntegerField, F, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def annotated_orders() -> QuerySet[Order]:
    """Orders carrying ``total_cents`` and ``item_count`` annotations."""
    return Order.objects.annotate(
        total_cents=Coalesce(
            Sum(
                F("items__quantity") * F("items__unit_price_cents"),
                output_field=BigIntegerField(),
            ),
            Value(0),
            output_field=BigIntegerField(),
        ),
        item_count=Coalesce(
            Sum("items__quantity", output_field=BigIntegerField()),
            Value(0),
            output_field=BigIntegerField(),
        ),
    )


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self) -> Order:
        order = Order.objects.create()
        logger.info("order.header_created", order_id=order.id)
        return order

    def add_item(
        self,
        order: Order,
        product_id: int,
        quantity: int,
        unit_price_cents: int,
    ) -> OrderItem:
        return OrderItem.objects.create(
            order=order,
            product_id=product_id,
            quantity=quantity,
            unit_price_cents=unit_price_cents,
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with its totals and eager-loaded items.

        ``prefetch_related("items__product")`` keeps the detail view to a
        fixed number of queries.  Returns ``None`` for non-existent or
        invalid IDs.
        """
        try:
            return (
                annotated_orders()
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, TypeError, ValidationError):
            return None

    def list(self) -> QuerySet[Order]:
        return annotated_orders().order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=entity.id)
        return entity
