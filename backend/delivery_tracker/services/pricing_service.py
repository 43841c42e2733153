"""Route/product price resolution and override management.

A product's ``price_per_ton`` is its base price on every route. A
``RouteProductPricing`` row overrides the price for one route and may hide
the product there. Entries freeze the resolved price when they are saved,
so everything that quotes a price goes through ``_resolve`` below.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.exceptions import InvalidReference, NotFound, ValidationFailed
from delivery_tracker.models.product import Product
from delivery_tracker.models.route import Route
from delivery_tracker.models.route_product_pricing import RouteProductPricing
from delivery_tracker.schemas.pricing import BulkPricingItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPrice:
    route_id: int
    product_id: int
    base_price: float
    effective_price: float
    is_available: bool
    has_override: bool


def _resolve(
    route_id: int,
    product: Product,
    override: RouteProductPricing | None,
) -> ResolvedPrice:
    """Apply the override to the product's base price.

    No override row means base price, available. With a row, its price wins
    and the product is hidden only when ``is_available`` is explicitly False.
    """
    if override is None:
        return ResolvedPrice(
            route_id=route_id,
            product_id=product.id,
            base_price=product.price_per_ton,
            effective_price=product.price_per_ton,
            is_available=True,
            has_override=False,
        )
    return ResolvedPrice(
        route_id=route_id,
        product_id=product.id,
        base_price=product.price_per_ton,
        effective_price=override.price_per_ton,
        is_available=override.is_available is not False,
        has_override=True,
    )


async def _get_override(
    db: AsyncSession,
    route_id: int,
    product_id: int,
) -> RouteProductPricing | None:
    result = await db.execute(
        select(RouteProductPricing).where(
            RouteProductPricing.route_id == route_id,
            RouteProductPricing.product_id == product_id,
        )
    )
    return result.scalar_one_or_none()


async def _require_route(db: AsyncSession, route_id: int) -> Route:
    route = await db.get(Route, route_id)
    if route is None:
        raise NotFound(f"Route with id {route_id} not found")
    return route


async def _products_with_overrides(
    db: AsyncSession,
    route_id: int,
) -> list[tuple[Product, RouteProductPricing | None]]:
    """Every product, left-joined with its override on the route, by name."""
    result = await db.execute(
        select(Product, RouteProductPricing)
        .outerjoin(
            RouteProductPricing,
            and_(
                RouteProductPricing.product_id == Product.id,
                RouteProductPricing.route_id == route_id,
            ),
        )
        .order_by(Product.name)
    )
    return [(row[0], row[1]) for row in result.all()]


async def resolve_price(
    db: AsyncSession,
    route_id: int,
    product_id: int,
) -> ResolvedPrice:
    """Resolve the effective price and availability of a product on a route."""
    await _require_route(db, route_id)
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFound(f"Product with id {product_id} not found")

    override = await _get_override(db, route_id, product_id)
    return _resolve(route_id, product, override)


async def list_available_products(db: AsyncSession, route_id: int) -> list[dict]:
    """Products selectable on a route, with their effective price, by name."""
    await _require_route(db, route_id)

    items = []
    for product, override in await _products_with_overrides(db, route_id):
        resolved = _resolve(route_id, product, override)
        if not resolved.is_available:
            continue
        items.append({
            "id": product.id,
            "name": product.name,
            "base_price": resolved.base_price,
            "effective_price": resolved.effective_price,
            "is_available": True,
        })
    return items


async def get_route_pricing(db: AsyncSession, route_id: int) -> list[dict]:
    """Full pricing matrix of a route: raw override values plus resolved ones."""
    await _require_route(db, route_id)

    rows = []
    for product, override in await _products_with_overrides(db, route_id):
        resolved = _resolve(route_id, product, override)
        rows.append({
            "product_id": product.id,
            "product_name": product.name,
            "base_price": product.price_per_ton,
            "pricing_id": override.id if override else None,
            "price_per_ton": override.price_per_ton if override else None,
            "override_available": override.is_available if override else None,
            "effective_price": resolved.effective_price,
            "is_available": resolved.is_available,
        })
    return rows


async def upsert_pricing(
    db: AsyncSession,
    route_id: int,
    product_id: int,
    price_per_ton: float,
    is_available: bool = True,
) -> RouteProductPricing:
    """Insert or replace the override for (route, product).

    Read-then-write inside the caller's transaction; the unique constraint
    on (route_id, product_id) backs it up.
    """
    if price_per_ton is None or price_per_ton <= 0:
        raise ValidationFailed("price_per_ton must be greater than 0")
    if await db.get(Route, route_id) is None:
        raise InvalidReference("route_id", route_id)
    if await db.get(Product, product_id) is None:
        raise InvalidReference("product_id", product_id)

    pricing = await _get_override(db, route_id, product_id)
    if pricing is None:
        pricing = RouteProductPricing(
            route_id=route_id,
            product_id=product_id,
            price_per_ton=price_per_ton,
            is_available=bool(is_available),
        )
        db.add(pricing)
    else:
        pricing.price_per_ton = price_per_ton
        pricing.is_available = bool(is_available)

    await db.flush()
    await db.refresh(pricing)
    logger.info(
        "Pricing set: route=%d product=%d price=%.2f available=%s",
        route_id, product_id, price_per_ton, bool(is_available),
    )
    return pricing


async def bulk_upsert_pricing(
    db: AsyncSession,
    route_id: int,
    items: list[BulkPricingItem],
) -> list[RouteProductPricing]:
    """Apply several overrides for one route. Any failure aborts the batch."""
    product_ids = [item.product_id for item in items]
    duplicates = sorted({pid for pid in product_ids if product_ids.count(pid) > 1})
    if duplicates:
        raise ValidationFailed(
            f"Duplicate product_id in pricing list: {', '.join(map(str, duplicates))}"
        )

    results = []
    for item in items:
        pricing = await upsert_pricing(
            db,
            route_id,
            item.product_id,
            item.price_per_ton,
            item.is_available,
        )
        results.append(pricing)
    return results


async def delete_pricing(db: AsyncSession, route_id: int, product_id: int) -> None:
    """Remove an override; the pair falls back to the base price, available."""
    pricing = await _get_override(db, route_id, product_id)
    if pricing is None:
        raise NotFound(
            f"No pricing override for route {route_id} and product {product_id}"
        )
    await db.delete(pricing)
    await db.flush()
    logger.info("Pricing override removed: route=%d product=%d", route_id, product_id)
