"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising HTTP-level exceptions, and the view layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError, ValidationError):
            return None

    def search(self, term: str, order_by: Sequence[str]) -> QuerySet[Product]:
        queryset = Product.objects.all()
        if term:
            queryset = queryset.filter(Q(name__icontains=term) | Q(sku__icontains=term))
        return queryset.order_by(*order_by)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=entity.id,
            sku=entity.sku,
        )
        return entity

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return Product.objects.filter(sku=sku.strip()).first()

    def get_for_update(self, id: int) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, TypeError, ValidationError):
            return None

    def lock_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Lock the requested rows in one ``SELECT ... FOR UPDATE``.

        Ordering by primary key gives every transaction the same lock
        order, so two orders over overlapping products cannot deadlock.
        """
        products = (
            Product.objects.select_for_update()
            .filter(id__in=list(ids))
            .order_by("id")
        )
        return {product.id: product for product in products}

    def decrement_stock(self, id: int, quantity: int) -> bool:
        """Conditional ``UPDATE ... SET stock = stock - n WHERE stock >= n``."""
        updated = Product.objects.filter(id=id, stock_quantity__gte=quantity).update(
            stock_quantity=F("stock_quantity") - quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    def is_referenced_by_orders(self, id: int) -> bool:
        # Reverse accessor declared by ``OrderItem.product``.
        return Product.objects.filter(id=id, order_items__isnull=False).exists()

    @transaction.atomic
    def delete(self, entity: Product) -> None:
        product_id = entity.id
        entity.delete()
        logger.info("product.deleted", product_id=product_id)
