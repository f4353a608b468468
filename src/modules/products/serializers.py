"""Product DRF serializers for API output.

Input validation happens in the Pydantic DTOs (``dtos.py``); these
serializers only shape responses and feed the OpenAPI schema.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.constants import MAX_INTEGER_VALUE, NAME_MAX_LENGTH, SKU_MAX_LENGTH
from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "sku",
            "price_cents",
            "stock_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.Serializer):
    """Documents the create payload in the API schema."""

    name = serializers.CharField(max_length=NAME_MAX_LENGTH)
    sku = serializers.CharField(max_length=SKU_MAX_LENGTH)
    price_cents = serializers.IntegerField(min_value=0, max_value=MAX_INTEGER_VALUE)
    stock_quantity = serializers.IntegerField(
        min_value=0, max_value=MAX_INTEGER_VALUE, required=False, default=0
    )


class ProductPatchSerializer(serializers.Serializer):
    """Documents the patch payload; name and SKU cannot change."""

    price_cents = serializers.IntegerField(
        min_value=0, max_value=MAX_INTEGER_VALUE, required=False
    )
    stock_quantity = serializers.IntegerField(
        min_value=0, max_value=MAX_INTEGER_VALUE, required=False
    )
