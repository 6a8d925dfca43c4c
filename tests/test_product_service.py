import asyncio

import pytest

from estoque_api.app.schemas.order import Order, OrderItem
from estoque_api.app.schemas.product import Product, ProductCreate, ProductRecord
from estoque_api.app.services.exceptions import (
    OutOfStockError,
    ProductNotFoundError,
    StockConflictError,
)
from estoque_api.app.services.product_service import ProductService

from .conftest import InMemoryProductRepository


def run(coro):
    return asyncio.run(coro)


def test_register_new_product_creates_one_record():
    repository = InMemoryProductRepository()
    service = ProductService(repository)

    run(service.register(ProductCreate(name="Produto A", description="Descrição A", price=10.0, quantity=50)))

    assert len(repository.saved) == 1
    stored = repository.find_by_name("Produto A")
    assert stored.id is not None
    assert (stored.description, stored.price, stored.quantity) == ("Descrição A", 10.0, 50)


def test_register_existing_product_increments_quantity(service, repository):
    run(service.register(ProductCreate(name="Produto B", description="Outra", price=99.0, quantity=100)))

    assert len(repository.records) == 1
    stored = repository.find_by_id(1)
    assert stored.quantity == 200
    assert stored.description == "Descrição B"
    assert stored.price == 20.0


def test_list_all_on_empty_store_returns_empty_list():
    service = ProductService(InMemoryProductRepository())

    assert run(service.list_all()) == []


def test_list_all_maps_every_record():
    repository = InMemoryProductRepository(
        [
            ProductRecord(id=1, name="Produto X", description="Desc X", price=5.0, quantity=20),
            ProductRecord(id=2, name="Produto Y", description="Desc Y", price=15.0, quantity=30),
        ]
    )

    products = run(ProductService(repository).list_all())

    assert [(p.name, p.description) for p in products] == [("Produto X", "Desc X"), ("Produto Y", "Desc Y")]
    assert all(isinstance(p, Product) for p in products)


def test_find_by_name_hit_returns_stored_fields(service):
    product = run(service.find_by_name("Produto B"))

    assert product == Product(id=1, name="Produto B", description="Descrição B", price=20.0, quantity=100)


def test_find_by_name_miss_returns_empty_product(service):
    product = run(service.find_by_name("Produto Inexistente"))

    assert product.name is None
    assert product.description is None
    assert product.price is None
    assert product.quantity is None
    assert product.id is None


def test_apply_order_with_enough_stock_decrements(service, repository):
    run(service.apply_order(Order(id=1, items=[OrderItem(id=1, quantity=5)])))

    assert repository.find_by_id(1).quantity == 95


def test_apply_order_with_insufficient_stock_raises_and_keeps_quantity(service, repository):
    with pytest.raises(OutOfStockError) as excinfo:
        run(service.apply_order(Order(id=2, items=[OrderItem(id=1, quantity=150)])))

    assert str(excinfo.value) == "Insufficient stock for product Produto B."
    assert excinfo.value.product_name == "Produto B"
    assert repository.find_by_id(1).quantity == 100
    assert repository.decrements == []


def test_apply_order_sequence_from_example(service, repository):
    run(service.apply_order(Order(id=1, items=[OrderItem(id=1, quantity=5)])))

    with pytest.raises(OutOfStockError, match="Insufficient stock for product Produto B."):
        run(service.apply_order(Order(id=2, items=[OrderItem(id=1, quantity=150)])))

    assert repository.find_by_id(1).quantity == 95


def test_apply_order_unknown_product_mutates_nothing(service, repository):
    with pytest.raises(ProductNotFoundError) as excinfo:
        run(service.apply_order(Order(id=3, items=[OrderItem(id=42, quantity=1)])))

    assert excinfo.value.product_id == 42
    assert repository.find_by_id(1).quantity == 100
    assert repository.decrements == []


def test_apply_order_multi_item_rejects_whole_order():
    repository = InMemoryProductRepository(
        [
            ProductRecord(id=1, name="Produto A", quantity=10),
            ProductRecord(id=2, name="Produto B", quantity=1),
        ]
    )
    service = ProductService(repository)

    with pytest.raises(OutOfStockError, match="Produto B"):
        run(service.apply_order(Order(id=4, items=[OrderItem(id=1, quantity=3), OrderItem(id=2, quantity=2)])))

    assert repository.find_by_id(1).quantity == 10
    assert repository.find_by_id(2).quantity == 1


def test_apply_order_sums_repeated_items():
    repository = InMemoryProductRepository([ProductRecord(id=1, name="Produto A", quantity=10)])
    service = ProductService(repository)

    with pytest.raises(OutOfStockError):
        run(service.apply_order(Order(id=5, items=[OrderItem(id=1, quantity=6), OrderItem(id=1, quantity=6)])))
    assert repository.find_by_id(1).quantity == 10

    run(service.apply_order(Order(id=6, items=[OrderItem(id=1, quantity=4), OrderItem(id=1, quantity=6)])))
    assert repository.find_by_id(1).quantity == 0
    assert repository.decrements == [{1: 10}]


class RacingRepository(InMemoryProductRepository):
    """Store whose stock drops between the service check and the decrement."""

    def decrement_quantities(self, quantities):
        self.records[1].quantity = 0
        raise StockConflictError(1)


def test_apply_order_conflict_in_store_becomes_out_of_stock():
    repository = RacingRepository([ProductRecord(id=1, name="Produto A", quantity=10)])

    with pytest.raises(OutOfStockError, match="Insufficient stock for product Produto A."):
        run(ProductService(repository).apply_order(Order(id=7, items=[OrderItem(id=1, quantity=5)])))
