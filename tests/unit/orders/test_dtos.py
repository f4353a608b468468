"""Unit tests for Order DTOs."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.unit


class TestCreateOrderItemDTO:
    def test_valid(self):
        item = CreateOrderItemDTO(product_id=3, quantity=2)
        assert item.product_id == 3
        assert item.quantity == 2

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError, match="at least 1"):
            CreateOrderItemDTO(product_id=1, quantity=quantity)

    @pytest.mark.parametrize("field", ["product_id", "quantity"])
    def test_values_must_fit_integer_columns(self, field):
        data = {"product_id": 1, "quantity": 1, field: 2**31}
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderItemDTO(**data)
        assert exc_info.value.errors()[0]["loc"] == (field,)


class TestCreateOrderDTO:
    def test_valid(self):
        dto = CreateOrderDTO(items=[CreateOrderItemDTO(product_id=1, quantity=1)])
        assert len(dto.items) == 1

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(items=[])

    def test_duplicate_products_are_allowed(self):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=1, quantity=2),
                CreateOrderItemDTO(product_id=1, quantity=3),
            ]
        )
        assert [item.quantity for item in dto.items] == [2, 3]

    def test_is_frozen(self):
        dto = CreateOrderDTO(items=[CreateOrderItemDTO(product_id=1, quantity=1)])
        with pytest.raises(ValidationError):
            dto.items = []
