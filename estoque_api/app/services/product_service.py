"""
Service layer for products and stock.

This module holds the business rules of the stock API:

* registering a product either creates it or, when the name already
  exists, adds the incoming quantity to the stored one;
* looking a product up by name never fails: a miss returns a
  ``Product`` with every field unset;
* applying an order checks every line item before touching the
  store, so an order is either fully applied or rejected with no
  change to any stock level.

Storage goes through a ``ProductRepository`` passed to the service,
which keeps these rules independent of SQLite.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from estoque_api.app.repositories.product_repository import ProductRepository
from estoque_api.app.schemas.order import Order
from estoque_api.app.schemas.product import Product, ProductCreate, ProductRecord
from estoque_api.app.services.exceptions import (
    OutOfStockError,
    ProductNotFoundError,
    StockConflictError,
)

logger = logging.getLogger(__name__)


class ProductService:
    """Service class for registering products and updating stock."""

    def __init__(self, repository: ProductRepository) -> None:
        self.repository = repository

    async def register(self, data: ProductCreate) -> None:
        """Register a product or add stock to an existing one.

        If no product with ``data.name`` is stored, a new record is
        created with the submitted fields.  Otherwise the submitted
        quantity is added to the stored quantity; description and price
        keep their stored values.
        """
        existing = self.repository.find_by_name(data.name)
        if existing is None:
            record = self.repository.save(
                ProductRecord(
                    name=data.name,
                    description=data.description,
                    price=data.price,
                    quantity=data.quantity,
                )
            )
            logger.info("Registered product %s (id=%s, quantity=%s)", record.name, record.id, record.quantity)
            return
        updated = self.repository.increment_quantity(existing.id, data.quantity)
        logger.info(
            "Added %s units to product %s (id=%s, quantity=%s)",
            data.quantity,
            existing.name,
            existing.id,
            updated.quantity if updated else None,
        )

    async def list_all(self) -> List[Product]:
        """Return every stored product.  Ordering is defined by the store."""
        return [record.to_product() for record in self.repository.find_all()]

    async def find_by_name(self, name: str) -> Product:
        """Return the product called ``name``, or an empty ``Product``."""
        record = self.repository.find_by_name(name)
        if record is None:
            return Product()
        return record.to_product()

    async def apply_order(self, order: Order) -> None:
        """Decrement stock for every line item of ``order``.

        Requested quantities are summed per product id first.  Every
        product is then resolved and checked; only when all of them
        have enough stock are the decrements handed to the store,
        which applies them in a single transaction.

        Raises
        ------
        ProductNotFoundError
            If a line item references an id with no stored product.
        OutOfStockError
            If a product holds fewer units than requested, including
            when the stock drops between the check and the update.
        """
        requested: Dict[int, int] = {}
        for item in order.items:
            requested[item.id] = requested.get(item.id, 0) + item.quantity

        for product_id, quantity in requested.items():
            record = self.repository.find_by_id(product_id)
            if record is None:
                logger.warning("Order %s rejected: product id %s not found", order.id, product_id)
                raise ProductNotFoundError(product_id)
            if record.quantity < quantity:
                logger.warning(
                    "Order %s rejected: product %s has %s units, %s requested",
                    order.id,
                    record.name,
                    record.quantity,
                    quantity,
                )
                raise OutOfStockError(record.name)

        try:
            self.repository.decrement_quantities(requested)
        except StockConflictError as exc:
            record = self.repository.find_by_id(exc.product_id)
            if record is None:
                raise ProductNotFoundError(exc.product_id) from exc
            logger.warning("Order %s rejected: stock of product %s changed concurrently", order.id, record.name)
            raise OutOfStockError(record.name) from exc

        logger.info("Order %s applied: %s", order.id, requested)
