"""
Pydantic schemas for orders.

An order consumes stock.  Each line item references a stored product
by its ``id`` and carries the requested ``quantity``.  The optional
descriptive fields are accepted for client convenience and ignored
when the order is applied.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .product import MAX_INTEGER


class OrderItem(BaseModel):
    """A single line item of an order."""

    id: int = Field(..., ge=1, le=MAX_INTEGER, description="Identifier of the stored product")
    quantity: int = Field(..., gt=0, le=MAX_INTEGER, description="Requested units")
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None


class Order(BaseModel):
    """Schema for an order applied against the stock."""

    id: Optional[int] = Field(None, le=MAX_INTEGER, description="Correlation identifier")
    items: List[OrderItem] = Field(..., min_length=1)
