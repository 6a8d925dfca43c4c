"""
Product and stock endpoints for API v1.

These routes are a thin adapter over ``ProductService``: they parse
the request body, call the service and pick the status code.  Domain
errors raised by the service are returned as a bare JSON string
holding the service message, like the success bodies: an order
exceeding the stock yields 400, an order referencing an unknown
product id yields 404.
"""

from typing import List, Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from estoque_api.app.repositories.product_repository import SQLiteProductRepository
from estoque_api.app.schemas.order import Order
from estoque_api.app.schemas.product import Product, ProductCreate
from estoque_api.app.services.exceptions import OutOfStockError, ProductNotFoundError
from estoque_api.app.services.product_service import ProductService

router = APIRouter()


def get_product_service() -> ProductService:
    """Provide a ``ProductService`` backed by the configured SQLite database."""
    return ProductService(SQLiteProductRepository())


@router.post("/", response_model=str)
async def register_product(
    product_in: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> str:
    """Register a product, or add stock if the name is already stored."""
    await service.register(product_in)
    return "Registered Successfully"


@router.get("/", response_model=List[Product])
async def list_products(service: ProductService = Depends(get_product_service)) -> List[Product]:
    """Return all products.  The list is empty when nothing is stored."""
    return await service.list_all()


@router.post("/orders", response_model=str)
async def apply_order(
    order: Order,
    service: ProductService = Depends(get_product_service),
) -> Union[str, JSONResponse]:
    """Apply an order against the stock.

    The order is applied in full or not at all.  Returns HTTP 400 with
    the message ``"Insufficient stock for product <name>."`` when any
    item exceeds the stock on hand.
    """
    try:
        await service.apply_order(order)
    except OutOfStockError as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.detail)
    except ProductNotFoundError as exc:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=exc.detail)
    return "Stock Updated"


@router.get("/{name}", response_model=Product)
async def find_product(name: str, service: ProductService = Depends(get_product_service)) -> Product:
    """Look a product up by exact name.

    A miss is not an error: the response is a product with every
    field set to ``null``.
    """
    return await service.find_by_name(name)
