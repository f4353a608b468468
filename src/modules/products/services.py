"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- SKU must be unique (pre-check plus the database's UNIQUE index).
- Price and stock cannot be negative (validated by the DTOs).
- Only price and stock can be patched; name and SKU are fixed.
- A product referenced by any order line item cannot be deleted.
- Catalog listings sort only by allow-listed columns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from modules.products.constants import (
    DEFAULT_SORT_FIELD,
    SORT_ASC,
    SORT_DESC,
    SORTABLE_FIELDS,
)
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.products.dtos import CreateProductDTO, PatchProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def build_ordering(sort: str | None, direction: str | None) -> List[str]:
    """Translate caller-supplied sort options into a safe ``order_by``.

    Unknown sort fields fall back to ``id`` ascending.  ``id`` is always
    appended as a tiebreaker so equal keys list deterministically.
    """
    if sort not in SORTABLE_FIELDS:
        return [DEFAULT_SORT_FIELD]
    prefix = "-" if (direction or SORT_ASC).lower() == SORT_DESC else ""
    ordering = [f"{prefix}{sort}"]
    if sort != "id":
        ordering.append(f"{prefix}id")
    return ordering


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing uniqueness rules.

        Raises:
            ProductAlreadyExists: if the SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = Product(
            name=dto.name,
            sku=dto.sku,
            price_cents=dto.price_cents,
            stock_quantity=dto.stock_quantity,
        )
        try:
            product = self._repo.save(product)
        except IntegrityError as exc:
            # A concurrent request inserted the same SKU after our pre-check.
            log.warning("product.duplicate_sku", detected_by="unique_index")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.") from exc

        log.info("product.created", product_id=product.id)
        return product

    @transaction.atomic
    def patch_product(self, id: int, dto: PatchProductDTO) -> Product:
        """Apply a price and/or stock change to an existing product.

        The row is locked first so a stock overwrite cannot interleave
        with an order placement decrementing the same product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("product.patched", product_id=product.id, **changes)
        return product

    @transaction.atomic
    def delete_product(self, id: int) -> None:
        """Permanently delete a product that no order refers to.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if any order line item references it.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=product.id, sku=product.sku)

        if self._repo.is_referenced_by_orders(product.id):
            log.warning("product.delete_blocked")
            raise ProductInUse(
                f"Product {product.id} is part of existing orders and cannot be deleted."
            )

        try:
            self._repo.delete(product)
        except ProtectedError as exc:
            log.warning("product.delete_blocked", detected_by="foreign_key")
            raise ProductInUse(
                f"Product {product.id} is part of existing orders and cannot be deleted."
            ) from exc

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self,
        search: str = "",
        sort: str | None = DEFAULT_SORT_FIELD,
        direction: str | None = SORT_ASC,
    ) -> QuerySet[Product]:
        """Return products matching ``search`` in the requested order."""
        return self._repo.search((search or "").strip(), build_ordering(sort, direction))

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
