from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.pricing import AvailableProduct
from delivery_tracker.schemas.registry import ProductCreate, ProductResponse, ProductUpdate
from delivery_tracker.services import pricing_service
from delivery_tracker.services.registry_service import products

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[ProductResponse]]:
    items = await products.list(db)
    return ApiResponse.ok([ProductResponse.model_validate(p) for p in items])


@router.get("/available/{route_id}")
async def list_available_products(
    route_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[AvailableProduct]]:
    """Products selectable on a route, priced with any route override applied."""
    items = await pricing_service.list_available_products(db, route_id)
    return ApiResponse.ok([AvailableProduct(**item) for item in items])


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProductResponse]:
    product = await products.get(db, product_id)
    return ApiResponse.ok(ProductResponse.model_validate(product))


@router.post("")
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProductResponse]:
    product = await products.create(db, body)
    return ApiResponse.ok(ProductResponse.model_validate(product))


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProductResponse]:
    product = await products.update(db, product_id, body)
    return ApiResponse.ok(ProductResponse.model_validate(product))


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await products.delete(db, product_id)
    return ApiResponse.ok(None)
