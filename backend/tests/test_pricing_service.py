import pytest
from sqlalchemy import update

from delivery_tracker.exceptions import InvalidReference, NotFound, ValidationFailed
from delivery_tracker.models.route_product_pricing import RouteProductPricing
from delivery_tracker.schemas.pricing import BulkPricingItem
from delivery_tracker.schemas.registry import ProductCreate, RouteCreate
from delivery_tracker.services import pricing_service
from delivery_tracker.services.registry_service import products, routes


async def test_no_override_uses_base_price_and_is_available(db, catalog):
    resolved = await pricing_service.resolve_price(
        db, catalog["route"].id, catalog["product"].id,
    )
    assert resolved.effective_price == 100.0
    assert resolved.base_price == 100.0
    assert resolved.is_available is True
    assert resolved.has_override is False


async def test_override_price_wins(db, catalog):
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, True,
    )
    resolved = await pricing_service.resolve_price(
        db, catalog["route"].id, catalog["product"].id,
    )
    assert resolved.effective_price == 120.0
    assert resolved.base_price == 100.0
    assert resolved.is_available is True
    assert resolved.has_override is True


async def test_override_can_hide_product(db, catalog):
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 120.0, False,
    )
    resolved = await pricing_service.resolve_price(
        db, catalog["route"].id, catalog["product"].id,
    )
    assert resolved.is_available is False
    assert resolved.effective_price == 120.0


async def test_unset_availability_reads_as_available(db, catalog):
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 90.0, False,
    )
    await db.execute(
        update(RouteProductPricing)
        .where(RouteProductPricing.product_id == catalog["product"].id)
        .values(is_available=None)
    )

    resolved = await pricing_service.resolve_price(
        db, catalog["route"].id, catalog["product"].id,
    )
    assert resolved.is_available is True
    assert resolved.effective_price == 90.0


async def test_override_is_scoped_to_its_route(db, catalog):
    other = await routes.create(db, RouteCreate(name="R2"))
    await pricing_service.upsert_pricing(
        db, catalog["route"].id, catalog["product"].id, 150.0, False,
    )
    resolved = await pricing_service.resolve_price(db, other.id, catalog["product"].id)
    assert resolved.effective_price == 100.0
    assert resolved.is_available is True


async def test_resolve_unknown_product_or_route(db, catalog):
    with pytest.raises(NotFound):
        await pricing_service.resolve_price(db, catalog["route"].id, 9999)
    with pytest.raises(NotFound):
        await pricing_service.resolve_price(db, 9999, catalog["product"].id)


async def test_upsert_keeps_single_row_per_pair(db, catalog):
    route_id, product_id = catalog["route"].id, catalog["product"].id
    first = await pricing_service.upsert_pricing(db, route_id, product_id, 110.0, True)
    second = await pricing_service.upsert_pricing(db, route_id, product_id, 130.0, False)

    assert first.id == second.id
    rows = await pricing_service.get_route_pricing(db, route_id)
    assert len(rows) == 1
    assert rows[0]["price_per_ton"] == 130.0
    assert rows[0]["override_available"] is False


async def test_upsert_rejects_bad_input(db, catalog):
    with pytest.raises(ValidationFailed):
        await pricing_service.upsert_pricing(
            db, catalog["route"].id, catalog["product"].id, 0, True,
        )
    with pytest.raises(InvalidReference) as exc_info:
        await pricing_service.upsert_pricing(db, 9999, catalog["product"].id, 10.0, True)
    assert exc_info.value.field == "route_id"
    with pytest.raises(InvalidReference) as exc_info:
        await pricing_service.upsert_pricing(db, catalog["route"].id, 9999, 10.0, True)
    assert exc_info.value.field == "product_id"


async def test_list_available_products_filters_and_orders(db, catalog):
    route_id = catalog["route"].id
    apples = await products.create(db, ProductCreate(name="Apples", price_per_ton=50.0))
    zinc = await products.create(db, ProductCreate(name="Zinc", price_per_ton=300.0))
    await pricing_service.upsert_pricing(db, route_id, catalog["product"].id, 120.0, False)
    await pricing_service.upsert_pricing(db, route_id, zinc.id, 280.0, True)

    items = await pricing_service.list_available_products(db, route_id)

    assert [i["name"] for i in items] == ["Apples", "Zinc"]
    assert items[0]["id"] == apples.id
    assert items[0]["effective_price"] == 50.0
    assert items[1]["effective_price"] == 280.0
    assert items[1]["base_price"] == 300.0


async def test_list_available_products_unknown_route(db, catalog):
    with pytest.raises(NotFound):
        await pricing_service.list_available_products(db, 9999)


async def test_route_pricing_matrix_lists_every_product(db, catalog):
    route_id = catalog["route"].id
    await products.create(db, ProductCreate(name="Gravel", price_per_ton=40.0))
    await pricing_service.upsert_pricing(db, route_id, catalog["product"].id, 120.0, False)

    rows = await pricing_service.get_route_pricing(db, route_id)

    by_name = {r["product_name"]: r for r in rows}
    assert [r["product_name"] for r in rows] == ["Gravel", "P1"]
    assert by_name["Gravel"]["pricing_id"] is None
    assert by_name["Gravel"]["effective_price"] == 40.0
    assert by_name["Gravel"]["is_available"] is True
    assert by_name["P1"]["effective_price"] == 120.0
    assert by_name["P1"]["is_available"] is False


async def test_bulk_upsert_applies_all(db, catalog):
    route_id = catalog["route"].id
    gravel = await products.create(db, ProductCreate(name="Gravel", price_per_ton=40.0))

    saved = await pricing_service.bulk_upsert_pricing(db, route_id, [
        BulkPricingItem(product_id=catalog["product"].id, price_per_ton=105.0, is_available=True),
        BulkPricingItem(product_id=gravel.id, price_per_ton=45.0, is_available=False),
    ])

    assert len(saved) == 2
    available = await pricing_service.list_available_products(db, route_id)
    assert [(i["name"], i["effective_price"]) for i in available] == [("P1", 105.0)]


async def test_bulk_upsert_rejects_duplicates(db, catalog):
    item = BulkPricingItem(product_id=catalog["product"].id, price_per_ton=105.0)
    with pytest.raises(ValidationFailed):
        await pricing_service.bulk_upsert_pricing(db, catalog["route"].id, [item, item])


async def test_delete_pricing_restores_default(db, catalog):
    route_id, product_id = catalog["route"].id, catalog["product"].id
    await pricing_service.upsert_pricing(db, route_id, product_id, 120.0, False)

    await pricing_service.delete_pricing(db, route_id, product_id)

    resolved = await pricing_service.resolve_price(db, route_id, product_id)
    assert resolved.effective_price == 100.0
    assert resolved.is_available is True
    with pytest.raises(NotFound):
        await pricing_service.delete_pricing(db, route_id, product_id)
