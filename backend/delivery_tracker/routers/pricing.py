from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.pricing import (
    BulkPricingRequest,
    PricingResponse,
    PricingUpsert,
    ResolvedPriceResponse,
    RoutePricingRow,
)
from delivery_tracker.services import pricing_service

router = APIRouter(prefix="/route-product-pricing", tags=["pricing"])


@router.post("/bulk")
async def bulk_set_pricing(
    body: BulkPricingRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[PricingResponse]]:
    items = await pricing_service.bulk_upsert_pricing(db, body.route_id, body.pricing)
    return ApiResponse.ok([PricingResponse.model_validate(p) for p in items])


@router.get("/{route_id}")
async def get_route_pricing(
    route_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[RoutePricingRow]]:
    rows = await pricing_service.get_route_pricing(db, route_id)
    return ApiResponse.ok([RoutePricingRow(**row) for row in rows])


@router.get("/{route_id}/{product_id}")
async def resolve_price(
    route_id: int,
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ResolvedPriceResponse]:
    resolved = await pricing_service.resolve_price(db, route_id, product_id)
    return ApiResponse.ok(ResolvedPriceResponse.model_validate(resolved))


@router.put("/{route_id}/{product_id}")
async def set_pricing(
    route_id: int,
    product_id: int,
    body: PricingUpsert,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PricingResponse]:
    pricing = await pricing_service.upsert_pricing(
        db, route_id, product_id, body.price_per_ton, body.is_available,
    )
    return ApiResponse.ok(PricingResponse.model_validate(pricing))


@router.delete("/{route_id}/{product_id}")
async def delete_pricing(
    route_id: int,
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await pricing_service.delete_pricing(db, route_id, product_id)
    return ApiResponse.ok(None)
