"""
Domain exceptions for the stock service.

Raised by the service layer (and, for ``StockConflictError``, by the
product store) when a business rule is violated.  The API layer
catches these and translates them into HTTP responses.
"""

from __future__ import annotations


class EstoqueError(Exception):
    """Base class for service layer errors."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class OutOfStockError(EstoqueError):
    """Requested quantity exceeds the stock on hand for a product."""

    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__(f"Insufficient stock for product {product_name}.")


class ProductNotFoundError(EstoqueError):
    """No stored product has the referenced identifier."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product with id {product_id} not found.")


class StockConflictError(EstoqueError):
    """A conditional decrement found less stock than it was checked against.

    Raised by the store after rolling back the whole batch of
    decrements.
    """

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Stock for product id {product_id} changed concurrently.")
