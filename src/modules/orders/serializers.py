"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem
from modules.products.constants import MAX_INTEGER_VALUE

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single line in an order placement request."""

    product_id = serializers.IntegerField(min_value=1, max_value=MAX_INTEGER_VALUE)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_INTEGER_VALUE)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order placement payload."""

    items = CreateOrderItemSerializer(many=True, allow_empty=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with the product's identity and the price paid."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    subtotal_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "product_id",
            "product_name",
            "product_sku",
            "quantity",
            "unit_price_cents",
            "subtotal_cents",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Order summary; totals come from repository annotations."""

    total_cents = serializers.IntegerField(read_only=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = ["id", "created_at", "total_cents", "item_count"]
        read_only_fields = fields


class OrderSerializer(OrderListSerializer):
    """Order detail with nested line items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta(OrderListSerializer.Meta):
        fields = ["id", "created_at", "items", "total_cents", "item_count"]
        read_only_fields = fields
