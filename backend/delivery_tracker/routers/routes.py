from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.registry import RouteCreate, RouteResponse, RouteUpdate
from delivery_tracker.services.registry_service import routes

router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("")
async def list_routes(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[RouteResponse]]:
    items = await routes.list(db)
    return ApiResponse.ok([RouteResponse.model_validate(r) for r in items])


@router.get("/{route_id}")
async def get_route(
    route_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RouteResponse]:
    route = await routes.get(db, route_id)
    return ApiResponse.ok(RouteResponse.model_validate(route))


@router.post("")
async def create_route(
    body: RouteCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RouteResponse]:
    route = await routes.create(db, body)
    return ApiResponse.ok(RouteResponse.model_validate(route))


@router.put("/{route_id}")
async def update_route(
    route_id: int,
    body: RouteUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RouteResponse]:
    route = await routes.update(db, route_id, body)
    return ApiResponse.ok(RouteResponse.model_validate(route))


@router.delete("/{route_id}")
async def delete_route(
    route_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await routes.delete(db, route_id)
    return ApiResponse.ok(None)
