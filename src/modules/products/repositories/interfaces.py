"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the
catalog rules (unique SKU, delete guard), the catalog search, and the
row-locking primitives used by order placement.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def search(self, term: str, order_by: Sequence[str]) -> "QuerySet[Product]":
        """Products whose name or SKU contains ``term`` (case-insensitive)."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Returns ``None`` if the
        product does not exist.
        """

    @abstractmethod
    def lock_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Lock every existing product in ``ids`` with a single query.

        Rows are locked in primary-key order.  Missing ids are simply
        absent from the returned mapping.
        """

    @abstractmethod
    def decrement_stock(self, id: int, quantity: int) -> bool:
        """Subtract ``quantity`` from stock only if enough is available.

        Returns ``False`` (and changes nothing) when stock is short.
        """

    @abstractmethod
    def is_referenced_by_orders(self, id: int) -> bool:
        """Whether any order line item points at the product."""

    @abstractmethod
    def delete(self, entity: Product) -> None:
        """Permanently remove a product."""
