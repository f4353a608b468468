"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Views)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``PatchProductDTO``: input for partial price/stock updates.

Money and stock fields are strict integers: ``"12"``, ``12.5`` and
``True`` are all rejected rather than coerced.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from modules.products.constants import MAX_INTEGER_VALUE, NAME_MAX_LENGTH, SKU_MAX_LENGTH

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` and ``sku`` are non-empty once surrounding whitespace is removed.
    - ``name`` and ``sku`` fit their columns.
    - ``price_cents`` is non-negative and fits an INTEGER column.
    - ``stock_quantity`` is non-negative (defaults to zero).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=NAME_MAX_LENGTH)
    sku: str = Field(max_length=SKU_MAX_LENGTH)
    price_cents: int = Field(strict=True, le=MAX_INTEGER_VALUE)
    stock_quantity: int = Field(default=0, strict=True, le=MAX_INTEGER_VALUE)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip()

    @field_validator("price_cents")
    @classmethod
    def price_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v


class PatchProductDTO(BaseModel):
    """Immutable DTO for product patch requests.

    Only ``price_cents`` and ``stock_quantity`` can change; at least one
    of them must be supplied.  Any other key is ignored.
    """

    model_config = ConfigDict(frozen=True)

    price_cents: Optional[int] = Field(default=None, strict=True, le=MAX_INTEGER_VALUE)
    stock_quantity: Optional[int] = Field(default=None, strict=True, le=MAX_INTEGER_VALUE)

    @field_validator("price_cents")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    @model_validator(mode="after")
    def at_least_one_field(self) -> PatchProductDTO:
        if self.price_cents is None and self.stock_quantity is None:
            raise PydanticCustomError(
                "no_fields_provided",
                "At least one of price_cents or stock_quantity must be provided.",
            )
        return self

    def changes(self) -> dict[str, int]:
        """Return only the fields the caller actually supplied."""
        return {
            field: value
            for field, value in (
                ("price_cents", self.price_cents),
                ("stock_quantity", self.stock_quantity),
            )
            if value is not None
        }
