"""Uniquely-keyed reference catalogs: routes, products, cars, expense types."""
import logging

from pydantic import BaseModel
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.exceptions import Conflict, NotFound, ValidationFailed
from delivery_tracker.models.base import Base
from delivery_tracker.models.car import Car
from delivery_tracker.models.entry import Entry
from delivery_tracker.models.expense import Expense
from delivery_tracker.models.expense_type import ExpenseType
from delivery_tracker.models.product import Product
from delivery_tracker.models.route import Route
from delivery_tracker.models.route_product_pricing import RouteProductPricing

logger = logging.getLogger(__name__)


class Registry:
    """CRUD over one catalog with a unique display key.

    ``guards`` lists ``(model, fk_column, label)`` references that block
    deletion; ``cascades`` lists ``(model, fk_column)`` rows removed along
    with the catalog row.
    """

    def __init__(
        self,
        model: type[Base],
        key: str,
        label: str,
        guards: tuple[tuple[type[Base], str, str], ...] = (),
        cascades: tuple[tuple[type[Base], str], ...] = (),
    ) -> None:
        self.model = model
        self.key = key
        self.label = label
        self.guards = guards
        self.cascades = cascades

    @property
    def _key_column(self):
        return getattr(self.model, self.key)

    async def list(self, db: AsyncSession) -> list:
        result = await db.execute(select(self.model).order_by(self._key_column))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, item_id: int):
        item = await db.get(self.model, item_id)
        if item is None:
            raise NotFound(f"{self.label} with id {item_id} not found")
        return item

    async def _ensure_unique(
        self,
        db: AsyncSession,
        value: str,
        exclude_id: int | None = None,
    ) -> None:
        query = select(self.model.id).where(self._key_column == value)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await db.execute(query)
        if result.first() is not None:
            raise Conflict(f"{self.label} '{value}' already exists")

    async def _flush(self, db: AsyncSession, value: str | None) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            if "UNIQUE constraint failed" not in str(e.orig):
                raise
            raise Conflict(f"{self.label} '{value}' already exists") from e

    async def create(self, db: AsyncSession, data: BaseModel):
        values = data.model_dump()
        await self._ensure_unique(db, values[self.key])

        item = self.model(**values)
        db.add(item)
        await self._flush(db, values[self.key])
        await db.refresh(item)
        return item

    async def update(self, db: AsyncSession, item_id: int, data: BaseModel):
        item = await self.get(db, item_id)

        update_data = data.model_dump(exclude_unset=True)
        columns = self.model.__table__.columns
        for field, value in update_data.items():
            if value is None and field != self.key and not columns[field].nullable:
                raise ValidationFailed(f"{field} cannot be null")

        if update_data.get(self.key) is None:
            update_data.pop(self.key, None)
        elif update_data[self.key] != getattr(item, self.key):
            await self._ensure_unique(db, update_data[self.key], exclude_id=item_id)

        for field, value in update_data.items():
            setattr(item, field, value)

        await self._flush(db, getattr(item, self.key))
        await db.refresh(item)
        return item

    async def reference_counts(self, db: AsyncSession, item_id: int) -> dict[str, int]:
        """Number of live rows per guarding table that point at the item."""
        counts = {}
        for model, column, label in self.guards:
            result = await db.execute(
                select(func.count()).select_from(model).where(
                    getattr(model, column) == item_id
                )
            )
            counts[label] = result.scalar() or 0
        return counts

    async def delete(self, db: AsyncSession, item_id: int) -> None:
        item = await self.get(db, item_id)

        counts = await self.reference_counts(db, item_id)
        blocking = {label: n for label, n in counts.items() if n}
        if blocking:
            detail = ", ".join(f"{n} {label}" for label, n in blocking.items())
            logger.warning(
                "Refusing to delete %s %d: referenced by %s", self.label, item_id, detail,
            )
            raise Conflict(
                f"Cannot delete {self.label.lower()}: it is in use ({detail})",
                meta={"blocked_by": blocking},
            )

        for model, column in self.cascades:
            await db.execute(delete(model).where(getattr(model, column) == item_id))
        await db.delete(item)
        await db.flush()
        logger.info("%s %d deleted", self.label, item_id)


routes = Registry(
    Route,
    key="name",
    label="Route",
    guards=((Entry, "route_id", "entries"),),
    cascades=((RouteProductPricing, "route_id"),),
)

products = Registry(
    Product,
    key="name",
    label="Product",
    guards=((Entry, "product_id", "entries"),),
    cascades=((RouteProductPricing, "product_id"),),
)

cars = Registry(
    Car,
    key="car_number",
    label="Car",
    guards=((Entry, "car_id", "entries"), (Expense, "car_id", "expenses")),
)

expense_types = Registry(
    ExpenseType,
    key="name",
    label="Expense type",
    guards=((Expense, "expense_type_id", "expenses"),),
)
