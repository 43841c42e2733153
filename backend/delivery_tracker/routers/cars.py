from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.registry import CarCreate, CarResponse, CarUpdate
from delivery_tracker.services.registry_service import cars

router = APIRouter(prefix="/cars", tags=["cars"])


@router.get("")
async def list_cars(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[CarResponse]]:
    items = await cars.list(db)
    return ApiResponse.ok([CarResponse.model_validate(c) for c in items])


@router.get("/{car_id}")
async def get_car(
    car_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CarResponse]:
    car = await cars.get(db, car_id)
    return ApiResponse.ok(CarResponse.model_validate(car))


@router.post("")
async def create_car(
    body: CarCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CarResponse]:
    car = await cars.create(db, body)
    return ApiResponse.ok(CarResponse.model_validate(car))


@router.put("/{car_id}")
async def update_car(
    car_id: int,
    body: CarUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CarResponse]:
    car = await cars.update(db, car_id, body)
    return ApiResponse.ok(CarResponse.model_validate(car))


@router.delete("/{car_id}")
async def delete_car(
    car_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await cars.delete(db, car_id)
    return ApiResponse.ok(None)
