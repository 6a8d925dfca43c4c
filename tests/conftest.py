from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from estoque_api.app.api.v1.endpoints.products import get_product_service
from estoque_api.app.core.db import init_db
from estoque_api.app.main import app
from estoque_api.app.repositories.product_repository import SQLiteProductRepository
from estoque_api.app.schemas.product import ProductRecord
from estoque_api.app.services.exceptions import StockConflictError
from estoque_api.app.services.product_service import ProductService


class InMemoryProductRepository:
    """Dict-backed product store that records every save."""

    def __init__(self, records: Optional[List[ProductRecord]] = None):
        self.records: Dict[int, ProductRecord] = {}
        self.saved: List[ProductRecord] = []
        self.decrements: List[Dict[int, int]] = []
        self._next_id = 1
        for record in records or []:
            self._store(record)

    def _store(self, record: ProductRecord) -> ProductRecord:
        if record.id is None:
            record = record.model_copy(update={"id": self._next_id})
        self._next_id = max(self._next_id, record.id + 1)
        self.records[record.id] = record.model_copy()
        return record

    def find_by_name(self, name: str) -> Optional[ProductRecord]:
        for record in self.records.values():
            if record.name == name:
                return record.model_copy()
        return None

    def find_by_id(self, product_id: int) -> Optional[ProductRecord]:
        record = self.records.get(product_id)
        return record.model_copy() if record else None

    def find_all(self) -> List[ProductRecord]:
        return [record.model_copy() for record in self.records.values()]

    def save(self, record: ProductRecord) -> ProductRecord:
        saved = self._store(record)
        self.saved.append(saved)
        return saved

    def increment_quantity(self, product_id: int, delta: int) -> Optional[ProductRecord]:
        record = self.records.get(product_id)
        if record is None:
            return None
        record.quantity += delta
        return record.model_copy()

    def decrement_quantities(self, quantities: Dict[int, int]) -> None:
        for product_id, quantity in quantities.items():
            record = self.records.get(product_id)
            if record is None or record.quantity < quantity:
                raise StockConflictError(product_id)
        for product_id, quantity in quantities.items():
            self.records[product_id].quantity -= quantity
        self.decrements.append(dict(quantities))


@pytest.fixture
def produto_b() -> ProductRecord:
    return ProductRecord(id=1, name="Produto B", description="Descrição B", price=20.0, quantity=100)


@pytest.fixture
def repository(produto_b) -> InMemoryProductRepository:
    return InMemoryProductRepository([produto_b])


@pytest.fixture
def service(repository) -> ProductService:
    return ProductService(repository)


@pytest.fixture
def sqlite_repository(tmp_path) -> SQLiteProductRepository:
    database_url = str(tmp_path / "estoque.db")
    init_db(database_url)
    return SQLiteProductRepository(database_url)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_product_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
