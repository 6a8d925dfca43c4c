"""
Pydantic schemas for products.

A product is identified by its unique ``name``.  The store assigns a
numeric ``id`` on first insert; orders reference products by that id.
``Product`` is the view returned to clients and may have every field
unset when a lookup by name misses.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Largest value an SQLite INTEGER column holds.
MAX_INTEGER = 2**63 - 1


class ProductCreate(BaseModel):
    """Schema for registering a product or adding stock to an existing one."""

    name: str = Field(..., min_length=1, description="Unique product name")
    description: Optional[str] = Field(None, description="Free‑text description")
    price: Optional[float] = Field(None, ge=0, description="Unit price")
    quantity: int = Field(..., ge=0, le=MAX_INTEGER, description="Units to add to the stock")


class Product(BaseModel):
    """Schema for reading a product.

    All fields are optional: a lookup that finds nothing returns a
    ``Product`` with every field set to ``None``.
    """

    id: Optional[int] = Field(None, description="Store identifier, used to reference the product in orders")
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None


class ProductRecord(BaseModel):
    """Persisted product as held by the product store.

    ``id`` is ``None`` until the record is saved for the first time.
    """

    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: int = Field(0, ge=0)

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            description=self.description,
            price=self.price,
            quantity=self.quantity,
        )
