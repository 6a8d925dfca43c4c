"""
Product store.

``ProductRepository`` describes the persistence contract the product
service depends on: lookups by name and by id, listing, saving and an
atomic batch decrement.  ``SQLiteProductRepository`` implements it on
top of the ``products`` table created by ``core.db.init_db``.

Every call opens its own connection and closes it before returning, so
no state is shared between requests other than the database itself.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Dict, List, Optional, Protocol

from estoque_api.app.core.db import get_connection
from estoque_api.app.schemas.product import ProductRecord
from estoque_api.app.services.exceptions import StockConflictError

logger = logging.getLogger(__name__)


class ProductRepository(Protocol):
    """
    Protocol describing the product store.

    Alternative implementations (an in‑memory store for tests, another
    database) only need to provide these methods.
    """

    def find_by_name(self, name: str) -> Optional[ProductRecord]: ...
    def find_by_id(self, product_id: int) -> Optional[ProductRecord]: ...
    def find_all(self) -> List[ProductRecord]: ...
    def save(self, record: ProductRecord) -> ProductRecord: ...
    def increment_quantity(self, product_id: int, delta: int) -> Optional[ProductRecord]: ...
    def decrement_quantities(self, quantities: Dict[int, int]) -> None: ...


class SQLiteProductRepository:
    """SQLite implementation of ``ProductRepository``."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.database_url = database_url

    def find_by_name(self, name: str) -> Optional[ProductRecord]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                "SELECT * FROM products WHERE name = ?", (name,)
            ).fetchone()
            return self._row_to_record(row) if row else None
        finally:
            conn.close()

    def find_by_id(self, product_id: int) -> Optional[ProductRecord]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            ).fetchone()
            return self._row_to_record(row) if row else None
        finally:
            conn.close()

    def find_all(self) -> List[ProductRecord]:
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute("SELECT * FROM products ORDER BY id ASC").fetchall()
            return [self._row_to_record(row) for row in rows]
        finally:
            conn.close()

    def save(self, record: ProductRecord) -> ProductRecord:
        """Insert a new record or update an existing one.

        Records without an ``id`` are inserted and returned with the id
        assigned by the database; records with an ``id`` overwrite the
        stored row.
        """
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            if record.id is None:
                cursor.execute(
                    """
                    INSERT INTO products (name, description, price, quantity)
                    VALUES (?, ?, ?, ?)
                    """,
                    (record.name, record.description, record.price, record.quantity),
                )
                saved = record.model_copy(update={"id": cursor.lastrowid})
            else:
                cursor.execute(
                    """
                    UPDATE products
                    SET name = ?, description = ?, price = ?, quantity = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (record.name, record.description, record.price, record.quantity, record.id),
                )
                saved = record
            conn.commit()
            logger.debug("Saved product %s (id=%s)", saved.name, saved.id)
            return saved
        finally:
            conn.close()

    def increment_quantity(self, product_id: int, delta: int) -> Optional[ProductRecord]:
        """Add ``delta`` units to the stored quantity of ``product_id``.

        The addition happens in the UPDATE itself so decrements committed
        after the caller read the record are preserved.  Returns the
        updated record, or ``None`` if no product has that id.
        """
        conn = get_connection(self.database_url)
        try:
            cursor = conn.execute(
                """
                UPDATE products
                SET quantity = quantity + ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (delta, product_id),
            )
            if cursor.rowcount != 1:
                return None
            row = conn.execute("SELECT * FROM products WHERE id = ?", (product_id,)).fetchone()
            conn.commit()
            return self._row_to_record(row)
        finally:
            conn.close()

    def decrement_quantities(self, quantities: Dict[int, int]) -> None:
        """Subtract ``quantities[product_id]`` from each product atomically.

        All updates run in one ``BEGIN IMMEDIATE`` transaction and are
        conditional on the stored quantity still covering the request.
        If any update matches no row the transaction is rolled back and
        ``StockConflictError`` is raised for that product.
        """
        conn = get_connection(self.database_url)
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                for product_id, quantity in quantities.items():
                    cursor = conn.execute(
                        """
                        UPDATE products
                        SET quantity = quantity - ?, updated_at = CURRENT_TIMESTAMP
                        WHERE id = ? AND quantity >= ?
                        """,
                        (quantity, product_id, quantity),
                    )
                    if cursor.rowcount != 1:
                        raise StockConflictError(product_id)
            except Exception:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> ProductRecord:
        """Convert a database row to a ``ProductRecord``."""
        return ProductRecord(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=row["price"],
            quantity=row["quantity"],
        )
