"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: one requested line (product and quantity).
- ``CreateOrderDTO``: the whole placement request.

The same product may appear on several lines; ``OrderService`` merges
them into a single line item.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.products.constants import MAX_INTEGER_VALUE


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single requested line.

    ``unit_price_cents`` is resolved by the Service Layer from the catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: int = Field(le=MAX_INTEGER_VALUE)
    quantity: int = Field(le=MAX_INTEGER_VALUE)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order placement requests.

    Validates that ``items`` contains at least one line.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v
