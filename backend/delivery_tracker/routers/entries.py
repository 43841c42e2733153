from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.models.entry import Entry
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.entry import EntryCreate, EntryFilter, EntryResponse
from delivery_tracker.services import entry_service

router = APIRouter(prefix="/entries", tags=["entries"])


def _entry_to_response(entry: Entry) -> EntryResponse:
    """Convert an Entry ORM object to EntryResponse with joined names."""
    resp = EntryResponse.model_validate(entry)
    resp.car_number = entry.car.car_number if entry.car else None
    resp.route_name = entry.route.name if entry.route else None
    resp.product_name = entry.product.name if entry.product else None
    return resp


@router.get("")
async def get_entries(
    car_id: int | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[EntryResponse]]:
    filters = EntryFilter(car_id=car_id, month=month, year=year)
    entries = await entry_service.get_entries(db, filters)
    return ApiResponse.ok(
        [_entry_to_response(e) for e in entries],
        meta={"total": len(entries)},
    )


@router.get("/{entry_id}")
async def get_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EntryResponse]:
    entry = await entry_service.get_entry(db, entry_id)
    return ApiResponse.ok(_entry_to_response(entry))


@router.post("")
async def create_entry(
    body: EntryCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EntryResponse]:
    entry = await entry_service.create_entry(db, body)
    return ApiResponse.ok(_entry_to_response(entry))


@router.put("/{entry_id}")
async def update_entry(
    entry_id: int,
    body: EntryCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EntryResponse]:
    entry = await entry_service.update_entry(db, entry_id, body)
    return ApiResponse.ok(_entry_to_response(entry))


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await entry_service.delete_entry(db, entry_id)
    return ApiResponse.ok(None)
