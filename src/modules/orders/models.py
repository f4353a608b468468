"""Order and OrderItem models.

Business rules implemented:
- An order owns one or more line items (CASCADE on the order side).
- A line item references its product with PROTECT, so a purchased
  product can never be deleted out from under an order.
- ``unit_price_cents`` snapshots the product price when the order is
  placed; later catalog price edits do not touch it.
- Quantity is at least 1 (model validator plus CHECK constraint).

Order totals are not stored: ``OrderDjangoRepository`` annotates
``total_cents`` and ``item_count`` from the line items.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models


class Order(models.Model):
    """Order aggregate root.

    Immutable once placed; there is no update path.
    """

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk}"


class OrderItem(models.Model):
    """Line item linking an Order to a Product at a fixed price."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price_cents = models.PositiveIntegerField()

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def subtotal_cents(self) -> int:
        return self.quantity * self.unit_price_cents

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} @ {self.unit_price_cents}"
