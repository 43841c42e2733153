from datetime import date

import pytest
from sqlalchemy import func, select

from delivery_tracker.exceptions import (
    InvalidReference,
    NotFound,
    ProductUnavailable,
    ValidationFailed,
)
from delivery_tracker.models.entry import Entry
from delivery_tracker.schemas.entry import EntryCreate, EntryFilter
from delivery_tracker.schemas.registry import CarCreate, ProductUpdate
from delivery_tracker.services import entry_service, pricing_service
from delivery_tracker.services.registry_service import cars, products


def _payload(catalog, quantity=5.0, entry_date=date(2024, 3, 10), **overrides) -> EntryCreate:
    values = {
        "car_id": catalog["car"].id,
        "route_id": catalog["route"].id,
        "product_id": catalog["product"].id,
        "quantity_tons": quantity,
        "entry_date": entry_date,
    }
    values.update(overrides)
    return EntryCreate(**values)


async def _entry_count(db) -> int:
    result = await db.execute(select(func.count(Entry.id)))
    return result.scalar()


async def test_create_freezes_amount_at_base_price(db, catalog):
    entry = await entry_service.create_entry(db, _payload(catalog))

    assert entry.unit_price == 100.0
    assert entry.calculated_amount == 500.0
    assert entry.car.car_number == "CAR-1"
    assert entry.route.name == "R1"
    assert entry.product.name == "P1"


async def test_create_uses_route_override(db, catalog):
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, True,
    )
    entry = await entry_service.create_entry(db, _payload(catalog, quantity=2.5))
    assert entry.calculated_amount == 300.0


async def test_later_price_changes_do_not_touch_saved_entries(db, catalog):
    entry = await entry_service.create_entry(db, _payload(catalog))
    entry_id = entry.id

    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, True,
    )
    await products.update(db, catalog["product"].id, ProductUpdate(price_per_ton=200.0))
    db.expire_all()

    stored = await entry_service.get_entry(db, entry_id)
    assert stored.calculated_amount == 500.0
    assert stored.unit_price == 100.0


async def test_update_reprices_at_current_rate(db, catalog):
    entry = await entry_service.create_entry(db, _payload(catalog))
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, True,
    )

    updated = await entry_service.update_entry(db, entry.id, _payload(catalog))

    assert updated.id == entry.id
    assert updated.unit_price == 120.0
    assert updated.calculated_amount == 600.0


async def test_update_switches_joined_names(db, catalog):
    entry = await entry_service.create_entry(db, _payload(catalog))
    other_car = await cars.create(db, CarCreate(car_number="CAR-2"))

    updated = await entry_service.update_entry(
        db, entry.id, _payload(catalog, car_id=other_car.id),
    )
    assert updated.car.car_number == "CAR-2"


async def test_unavailable_product_is_rejected_and_nothing_saved(db, catalog):
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, False,
    )
    with pytest.raises(ProductUnavailable):
        await entry_service.create_entry(db, _payload(catalog))
    assert await _entry_count(db) == 0


async def test_update_to_unavailable_pair_keeps_old_values(db, catalog):
    entry = await entry_service.create_entry(db, _payload(catalog))
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, False,
    )
    with pytest.raises(ProductUnavailable):
        await entry_service.update_entry(db, entry.id, _payload(catalog, quantity=9.0))

    stored = await entry_service.get_entry(db, entry.id)
    assert stored.quantity_tons == 5.0
    assert stored.calculated_amount == 500.0


@pytest.mark.parametrize("field", ["car_id", "route_id", "product_id"])
async def test_invalid_reference_names_the_field(db, catalog, field):
    with pytest.raises(InvalidReference) as exc_info:
        await entry_service.create_entry(db, _payload(catalog, **{field: 9999}))
    assert exc_info.value.field == field
    assert await _entry_count(db) == 0


async def test_non_positive_quantity_is_rejected(db, catalog):
    data = _payload(catalog).model_copy(update={"quantity_tons": 0})
    with pytest.raises(ValidationFailed):
        await entry_service.create_entry(db, data)


async def test_update_and_delete_unknown_entry(db, catalog):
    with pytest.raises(NotFound):
        await entry_service.update_entry(db, 9999, _payload(catalog))
    with pytest.raises(NotFound):
        await entry_service.delete_entry(db, 9999)


async def test_delete_entry(db, catalog):
    entry = await entry_service.create_entry(db, _payload(catalog))
    await entry_service.delete_entry(db, entry.id)
    assert await _entry_count(db) == 0


async def test_list_filters_by_month_and_car_newest_first(db, catalog):
    other_car = await cars.create(db, CarCreate(car_number="CAR-2"))
    first = await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 3, 1)))
    second = await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 3, 31)))
    same_day = await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 3, 31)))
    await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 4, 1)))
    await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 2, 29)))
    await entry_service.create_entry(
        db, _payload(catalog, car_id=other_car.id, entry_date=date(2024, 3, 5)),
    )

    march = await entry_service.get_entries(
        db, EntryFilter(car_id=catalog["car"].id, month=3, year=2024),
    )
    assert [e.id for e in march] == [same_day.id, second.id, first.id]

    all_entries = await entry_service.get_entries(db, EntryFilter())
    assert len(all_entries) == 6


async def test_month_without_year_does_not_filter(db, catalog):
    await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 3, 1)))
    await entry_service.create_entry(db, _payload(catalog, entry_date=date(2024, 5, 1)))

    entries = await entry_service.get_entries(db, EntryFilter(month=3))
    assert len(entries) == 2
