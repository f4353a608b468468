"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.products.exceptions import ProductNotFound


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InsufficientStock(Exception):
    """A product cannot cover the requested quantity.

    ``available`` is the stock seen at validation time; it may be ``None``
    when the shortfall is detected by the conditional decrement instead.
    """

    def __init__(self, product_id: int, requested: int, available: int | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        if available is None:
            message = f"Insufficient stock for product {product_id}: requested {requested}."
        else:
            message = (
                f"Insufficient stock for product {product_id}: "
                f"requested {requested}, available {available}."
            )
        super().__init__(message)


__all__ = ["InsufficientStock", "OrderNotFound", "ProductNotFound"]
