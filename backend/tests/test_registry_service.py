from datetime import date

import pytest
from sqlalchemy import func, select

from delivery_tracker.exceptions import Conflict, NotFound, ValidationFailed
from delivery_tracker.models.route_product_pricing import RouteProductPricing
from delivery_tracker.schemas.entry import EntryCreate
from delivery_tracker.schemas.expense import ExpenseCreate
from delivery_tracker.schemas.registry import (
    CarCreate,
    CarUpdate,
    ExpenseTypeCreate,
    ProductCreate,
    ProductUpdate,
    RouteCreate,
    RouteUpdate,
)
from delivery_tracker.services import entry_service, expense_service, pricing_service
from delivery_tracker.services.registry_service import cars, expense_types, products, routes


async def _pricing_rows(db) -> int:
    result = await db.execute(select(func.count(RouteProductPricing.id)))
    return result.scalar()


async def _record_entry(db, catalog) -> None:
    await entry_service.create_entry(db, EntryCreate(
        car_id=catalog["car"].id,
        route_id=catalog["route"].id,
        product_id=catalog["product"].id,
        quantity_tons=1.0,
        entry_date=date(2024, 1, 2),
    ))


async def test_list_orders_by_display_key(db):
    for name in ("Zeta", "Alpha", "Mid"):
        await routes.create(db, RouteCreate(name=name))
    for number in ("KA-09", "KA-01"):
        await cars.create(db, CarCreate(car_number=number))

    assert [r.name for r in await routes.list(db)] == ["Alpha", "Mid", "Zeta"]
    assert [c.car_number for c in await cars.list(db)] == ["KA-01", "KA-09"]


async def test_create_duplicate_key_conflicts(db, catalog):
    with pytest.raises(Conflict):
        await routes.create(db, RouteCreate(name="R1"))
    with pytest.raises(Conflict):
        await products.create(db, ProductCreate(name="P1", price_per_ton=5.0))
    with pytest.raises(Conflict):
        await cars.create(db, CarCreate(car_number="CAR-1"))


async def test_update_changes_only_given_fields(db):
    route = await routes.create(db, RouteCreate(name="North", description="via hills"))
    updated = await routes.update(db, route.id, RouteUpdate(name="North-2"))
    assert updated.name == "North-2"
    assert updated.description == "via hills"


async def test_update_to_own_key_is_allowed(db, catalog):
    car = await cars.update(db, catalog["car"].id, CarUpdate(car_number="CAR-1", description="truck"))
    assert car.description == "truck"


async def test_update_collision_and_missing(db, catalog):
    other = await routes.create(db, RouteCreate(name="R2"))
    with pytest.raises(Conflict):
        await routes.update(db, other.id, RouteUpdate(name="R1"))
    with pytest.raises(NotFound):
        await routes.update(db, 9999, RouteUpdate(name="X"))


async def test_update_rejects_null_for_required_field(db, catalog):
    product_id = catalog["product"].id

    with pytest.raises(ValidationFailed, match="price_per_ton cannot be null"):
        await products.update(db, product_id, ProductUpdate(price_per_ton=None))

    product = await products.get(db, product_id)
    assert product.price_per_ton == 100.0


async def test_delete_in_use_is_blocked_with_reason(db, catalog):
    await _record_entry(db, catalog)

    for registry, item in (
        (routes, catalog["route"]),
        (products, catalog["product"]),
        (cars, catalog["car"]),
    ):
        with pytest.raises(Conflict) as exc_info:
            await registry.delete(db, item.id)
        assert exc_info.value.meta == {"blocked_by": {"entries": 1}}

    assert len(await routes.list(db)) == 1
    assert len(await products.list(db)) == 1
    assert len(await cars.list(db)) == 1


async def test_car_and_expense_type_blocked_by_expenses(db, catalog):
    fuel = await expense_types.create(db, ExpenseTypeCreate(name="Fuel"))
    await expense_service.create_expense(db, ExpenseCreate(
        car_id=catalog["car"].id,
        expense_type_id=fuel.id,
        amount=40.0,
        expense_date=date(2024, 1, 3),
    ))

    with pytest.raises(Conflict) as exc_info:
        await cars.delete(db, catalog["car"].id)
    assert exc_info.value.meta == {"blocked_by": {"expenses": 1}}

    with pytest.raises(Conflict):
        await expense_types.delete(db, fuel.id)


async def test_delete_route_cascades_to_pricing_only(db, catalog):
    other = await routes.create(db, RouteCreate(name="R2"))
    await pricing_service.upsert_pricing(db, catalog["route"].id, catalog["product"].id, 90.0, True)
    await pricing_service.upsert_pricing(db, other.id, catalog["product"].id, 95.0, True)

    await routes.delete(db, catalog["route"].id)

    assert [r.name for r in await routes.list(db)] == ["R2"]
    assert await _pricing_rows(db) == 1
    assert len(await products.list(db)) == 1


async def test_delete_product_cascades_to_pricing(db, catalog):
    await pricing_service.upsert_pricing(db, catalog["route"].id, catalog["product"].id, 90.0, True)

    await products.delete(db, catalog["product"].id)

    assert await _pricing_rows(db) == 0
    assert await products.list(db) == []


async def test_delete_missing_row(db):
    with pytest.raises(NotFound):
        await expense_types.delete(db, 9999)
