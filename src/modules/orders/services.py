"""Order service layer (Use Cases).

Orchestrates order placement and order queries.  ``place_order`` is the
unit-of-work boundary: every product check, insert and stock decrement
commits together or not at all.

Business rules enforced:
- Lines for the same product are merged into one line item.
- Every product must exist and cover its full quantity before anything
  is written.
- Product rows are locked (``SELECT ... FOR UPDATE``) in primary-key
  order, so overlapping placements serialize instead of deadlocking.
- Line items snapshot the product's current price.
- Stock is decremented with a conditional UPDATE and never goes negative.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable

import structlog
from django.db import transaction

from modules.orders.exceptions import InsufficientStock, OrderNotFound
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def coalesce_items(items: Iterable[CreateOrderItemDTO]) -> Dict[int, int]:
    """Sum quantities per product, keeping first-seen product order."""
    quantities: Dict[int, int] = {}
    for item in items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
    return quantities


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def place_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order and reserve its stock atomically.

        Steps:
        1. Merge duplicate product lines.
        2. Lock all referenced products in one query (PK order).
        3. Validate existence and stock for every product.
        4. Insert the order header.
        5. For each product: insert the line item at the current price,
           then decrement stock conditionally.

        Raises:
            ProductNotFound: a referenced product does not exist.
            InsufficientStock: a product cannot cover its quantity.
        """
        quantities = coalesce_items(dto.items)
        log = logger.bind(product_ids=list(quantities), line_count=len(dto.items))
        log.info("order.placement_started")

        products = self._product_repo.lock_many(quantities)

        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                log.warning("order.product_missing", product_id=product_id)
                raise ProductNotFound(f"Product {product_id} not found.")
            if product.stock_quantity < quantity:
                log.warning(
                    "order.insufficient_stock",
                    product_id=product_id,
                    requested=quantity,
                    available=product.stock_quantity,
                )
                raise InsufficientStock(product_id, quantity, product.stock_quantity)

        order = self._order_repo.create()

        for product_id, quantity in quantities.items():
            product = products[product_id]
            self._order_repo.add_item(
                order,
                product_id=product_id,
                quantity=quantity,
                unit_price_cents=product.price_cents,
            )
            if not self._product_repo.decrement_stock(product_id, quantity):
                # Unreachable while placements are serialized by the database;
                # the atomic block rolls back the header and earlier lines.
                log.warning(
                    "order.stock_race_lost",
                    product_id=product_id,
                    requested=quantity,
                )
                raise InsufficientStock(product_id, quantity)

        log.info("order.placed", order_id=order.id)
        placed = self._order_repo.get_by_id(order.id)
        return placed or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self) -> QuerySet[Order]:
        """Return every order, newest first."""
        return self._order_repo.list()
