"""Product model: the catalog store.

Rules enforced by the database as well as the application:
- SKU is unique in the system and never empty.
- Name is never empty.
- Price (integer minor units) and stock quantity cannot be negative.

``name`` and ``sku`` are fixed at creation; only ``price_cents`` and
``stock_quantity`` are mutable (see ``ProductService.patch_product``).
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import TimestampedModel
from modules.products.constants import NAME_MAX_LENGTH, SKU_MAX_LENGTH


class Product(TimestampedModel):
    """Catalog entry.

    ``unique=True`` on ``sku`` creates the UNIQUE index backing
    ``ProductAlreadyExists``; no additional index is needed.
    """

    name = models.CharField(max_length=NAME_MAX_LENGTH)
    sku = models.CharField(max_length=SKU_MAX_LENGTH, unique=True)
    price_cents = models.PositiveIntegerField()
    stock_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_cents__gte=0),
                name="products_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=~models.Q(name=""),
                name="products_name_not_empty",
            ),
            models.CheckConstraint(
                condition=~models.Q(sku=""),
                name="products_sku_not_empty",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.sku.strip()
        if not self.sku:
            raise ValidationError({"sku": "SKU must not be empty."})
        if not (self.name or "").strip():
            raise ValidationError({"name": "Name must not be empty."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.sku:
            self.sku = self.sku.strip()
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
