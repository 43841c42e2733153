import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from delivery_tracker.exceptions import (
    InvalidReference,
    NotFound,
    ProductUnavailable,
    ValidationFailed,
)
from delivery_tracker.models.car import Car
from delivery_tracker.models.entry import Entry
from delivery_tracker.models.product import Product
from delivery_tracker.models.route import Route
from delivery_tracker.schemas.entry import EntryCreate, EntryFilter
from delivery_tracker.services.pricing_service import ResolvedPrice, resolve_price
from delivery_tracker.utils.date_helpers import month_bounds

logger = logging.getLogger(__name__)


def _compute_amount(quantity_tons: float, unit_price: float) -> float:
    """Billed amount of a delivery: quantity x effective price per ton."""
    return quantity_tons * unit_price


async def _price_for(db: AsyncSession, data: EntryCreate) -> ResolvedPrice:
    """Validate an entry payload and resolve the price it will be billed at."""
    if data.quantity_tons is None or data.quantity_tons <= 0:
        raise ValidationFailed("quantity_tons must be greater than 0")

    for field, model, value in (
        ("car_id", Car, data.car_id),
        ("route_id", Route, data.route_id),
        ("product_id", Product, data.product_id),
    ):
        if await db.get(model, value) is None:
            raise InvalidReference(field, value)

    resolved = await resolve_price(db, data.route_id, data.product_id)
    if not resolved.is_available:
        raise ProductUnavailable("Product not available for this route")
    return resolved


async def _load(db: AsyncSession, entry_id: int) -> Entry | None:
    result = await db.execute(
        select(Entry)
        .options(
            selectinload(Entry.car),
            selectinload(Entry.route),
            selectinload(Entry.product),
        )
        .where(Entry.id == entry_id)
    )
    return result.scalar_one_or_none()


async def get_entry(db: AsyncSession, entry_id: int) -> Entry:
    entry = await _load(db, entry_id)
    if entry is None:
        raise NotFound(f"Entry with id {entry_id} not found")
    return entry


async def create_entry(db: AsyncSession, data: EntryCreate) -> Entry:
    """Record a delivery, freezing its amount at the price in effect now."""
    resolved = await _price_for(db, data)

    entry = Entry(
        car_id=data.car_id,
        route_id=data.route_id,
        product_id=data.product_id,
        quantity_tons=data.quantity_tons,
        unit_price=resolved.effective_price,
        calculated_amount=_compute_amount(data.quantity_tons, resolved.effective_price),
        entry_date=data.entry_date,
    )
    db.add(entry)
    await db.flush()
    logger.info(
        "Entry %d created: %.3f t @ %.2f = %.2f",
        entry.id, entry.quantity_tons, entry.unit_price, entry.calculated_amount,
    )
    return await get_entry(db, entry.id)


async def update_entry(db: AsyncSession, entry_id: int, data: EntryCreate) -> Entry:
    """Correct an entry. The amount is recomputed at the current price."""
    entry = await db.get(Entry, entry_id)
    if entry is None:
        raise NotFound(f"Entry with id {entry_id} not found")

    resolved = await _price_for(db, data)

    entry.car_id = data.car_id
    entry.route_id = data.route_id
    entry.product_id = data.product_id
    entry.quantity_tons = data.quantity_tons
    entry.unit_price = resolved.effective_price
    entry.calculated_amount = _compute_amount(data.quantity_tons, resolved.effective_price)
    entry.entry_date = data.entry_date
    await db.flush()
    logger.info(
        "Entry %d updated: %.3f t @ %.2f = %.2f",
        entry.id, entry.quantity_tons, entry.unit_price, entry.calculated_amount,
    )

    # Relationships may still point at the previous car/route/product
    db.expire(entry, ["car", "route", "product"])
    return await get_entry(db, entry.id)


async def delete_entry(db: AsyncSession, entry_id: int) -> None:
    entry = await db.get(Entry, entry_id)
    if entry is None:
        raise NotFound(f"Entry with id {entry_id} not found")
    await db.delete(entry)
    await db.flush()
    logger.info("Entry %d deleted", entry_id)


async def get_entries(db: AsyncSession, filters: EntryFilter) -> list[Entry]:
    """Entries matching the filters, newest first."""
    query = select(Entry).options(
        selectinload(Entry.car),
        selectinload(Entry.route),
        selectinload(Entry.product),
    )

    if filters.car_id:
        query = query.where(Entry.car_id == filters.car_id)
    if filters.has_period:
        start, end = month_bounds(filters.year, filters.month)
        query = query.where(Entry.entry_date >= start, Entry.entry_date < end)

    query = query.order_by(Entry.entry_date.desc(), Entry.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())
