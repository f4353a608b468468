"""Unit tests for OrderService with mocked repositories.

Covers:
- coalesce_items: merging repeated products in first-seen order.
- place_order: lock-then-validate-then-write ordering, price snapshot,
  missing product, short stock, lost decrement race.
- get_order / list_orders delegation.
"""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock, OrderNotFound
from modules.orders.models import Order
from modules.orders.services import OrderService, coalesce_items
from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_repo():
    repo = MagicMock()
    repo.create.return_value = Order(id=7)
    repo.get_by_id.side_effect = lambda id: Order(id=id)
    return repo


@pytest.fixture()
def product_repo():
    repo = MagicMock()
    repo.decrement_stock.return_value = True
    return repo


@pytest.fixture()
def service(order_repo, product_repo):
    return OrderService(order_repository=order_repo, product_repository=product_repo)


def _dto(*lines: tuple[int, int]) -> CreateOrderDTO:
    return CreateOrderDTO(
        items=[CreateOrderItemDTO(product_id=pid, quantity=qty) for pid, qty in lines]
    )


def _product(id: int, price_cents: int = 500, stock_quantity: int = 10) -> Product:
    return Product(
        id=id,
        name=f"Product {id}",
        sku=f"SKU-{id}",
        price_cents=price_cents,
        stock_quantity=stock_quantity,
    )


# ===========================================================================
# coalesce_items
# ===========================================================================


class TestCoalesceItems:
    def test_sums_repeated_products(self):
        assert coalesce_items(_dto((1, 2), (1, 3)).items) == {1: 5}

    def test_keeps_first_seen_order(self):
        merged = coalesce_items(_dto((9, 1), (2, 1), (9, 4)).items)
        assert list(merged.items()) == [(9, 5), (2, 1)]


# ===========================================================================
# place_order
# ===========================================================================


class TestPlaceOrder:
    def test_success_snapshots_price_and_decrements(
        self, service, order_repo, product_repo
    ):
        product_repo.lock_many.return_value = {1: _product(1, price_cents=1250)}

        order = service.place_order(_dto((1, 2)))

        assert order.id == 7
        order_repo.add_item.assert_called_once_with(
            order_repo.create.return_value,
            product_id=1,
            quantity=2,
            unit_price_cents=1250,
        )
        product_repo.decrement_stock.assert_called_once_with(1, 2)

    def test_locks_all_products_in_one_call(self, service, product_repo):
        product_repo.lock_many.return_value = {1: _product(1), 2: _product(2)}

        service.place_order(_dto((2, 1), (1, 1), (2, 1)))

        product_repo.lock_many.assert_called_once()
        assert list(product_repo.lock_many.call_args.args[0]) == [2, 1]

    def test_duplicate_lines_become_one_item(self, service, order_repo, product_repo):
        product_repo.lock_many.return_value = {1: _product(1)}

        service.place_order(_dto((1, 2), (1, 3)))

        assert order_repo.add_item.call_count == 1
        assert order_repo.add_item.call_args.kwargs["quantity"] == 5
        product_repo.decrement_stock.assert_called_once_with(1, 5)

    def test_missing_product_raises_before_any_write(
        self, service, order_repo, product_repo
    ):
        product_repo.lock_many.return_value = {1: _product(1)}

        with pytest.raises(ProductNotFound, match="42"):
            service.place_order(_dto((1, 1), (42, 1)))

        order_repo.create.assert_not_called()
        product_repo.decrement_stock.assert_not_called()

    def test_short_stock_raises_before_any_write(
        self, service, order_repo, product_repo
    ):
        product_repo.lock_many.return_value = {
            1: _product(1, stock_quantity=10),
            2: _product(2, stock_quantity=3),
        }

        with pytest.raises(InsufficientStock) as exc_info:
            service.place_order(_dto((1, 1), (2, 4)))

        assert exc_info.value.product_id == 2
        assert exc_info.value.requested == 4
        assert exc_info.value.available == 3
        order_repo.create.assert_not_called()
        product_repo.decrement_stock.assert_not_called()

    def test_combined_duplicate_demand_checked_against_stock(
        self, service, order_repo, product_repo
    ):
        product_repo.lock_many.return_value = {1: _product(1, stock_quantity=4)}

        with pytest.raises(InsufficientStock):
            service.place_order(_dto((1, 3), (1, 2)))

        order_repo.create.assert_not_called()

    def test_lost_decrement_raises(self, service, product_repo):
        product_repo.lock_many.return_value = {1: _product(1), 2: _product(2)}
        product_repo.decrement_stock.side_effect = [True, False]

        with pytest.raises(InsufficientStock) as exc_info:
            service.place_order(_dto((1, 1), (2, 1)))

        assert exc_info.value.product_id == 2
        assert exc_info.value.available is None
        assert product_repo.decrement_stock.call_args_list == [call(1, 1), call(2, 1)]


# ===========================================================================
# Queries
# ===========================================================================


class TestQueries:
    def test_get_order(self, service):
        assert service.get_order(3).id == 3

    def test_get_order_not_found(self, service, order_repo):
        order_repo.get_by_id.side_effect = None
        order_repo.get_by_id.return_value = None
        with pytest.raises(OrderNotFound):
            service.get_order(999)

    def test_list_orders_delegates(self, service, order_repo):
        assert service.list_orders() is order_repo.list.return_value
