import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from delivery_tracker.exceptions import InvalidReference, NotFound, ValidationFailed
from delivery_tracker.models.car import Car
from delivery_tracker.models.expense import Expense
from delivery_tracker.models.expense_type import ExpenseType
from delivery_tracker.schemas.expense import ExpenseCreate, ExpenseFilter
from delivery_tracker.utils.date_helpers import month_bounds

logger = logging.getLogger(__name__)


async def _validate(db: AsyncSession, data: ExpenseCreate) -> None:
    if data.amount is None or data.amount <= 0:
        raise ValidationFailed("amount must be greater than 0")
    if await db.get(Car, data.car_id) is None:
        raise InvalidReference("car_id", data.car_id)
    if await db.get(ExpenseType, data.expense_type_id) is None:
        raise InvalidReference("expense_type_id", data.expense_type_id)


async def get_expense(db: AsyncSession, expense_id: int) -> Expense:
    result = await db.execute(
        select(Expense)
        .options(selectinload(Expense.car), selectinload(Expense.expense_type))
        .where(Expense.id == expense_id)
    )
    expense = result.scalar_one_or_none()
    if expense is None:
        raise NotFound(f"Expense with id {expense_id} not found")
    return expense


async def create_expense(db: AsyncSession, data: ExpenseCreate) -> Expense:
    await _validate(db, data)

    expense = Expense(
        car_id=data.car_id,
        expense_type_id=data.expense_type_id,
        amount=data.amount,
        description=data.description or "",
        expense_date=data.expense_date,
    )
    db.add(expense)
    await db.flush()
    logger.info("Expense %d recorded: car=%d amount=%.2f", expense.id, expense.car_id, expense.amount)
    return await get_expense(db, expense.id)


async def update_expense(
    db: AsyncSession,
    expense_id: int,
    data: ExpenseCreate,
) -> Expense:
    expense = await db.get(Expense, expense_id)
    if expense is None:
        raise NotFound(f"Expense with id {expense_id} not found")

    await _validate(db, data)

    expense.car_id = data.car_id
    expense.expense_type_id = data.expense_type_id
    expense.amount = data.amount
    expense.description = data.description or ""
    expense.expense_date = data.expense_date
    await db.flush()

    db.expire(expense, ["car", "expense_type"])
    return await get_expense(db, expense.id)


async def delete_expense(db: AsyncSession, expense_id: int) -> None:
    expense = await db.get(Expense, expense_id)
    if expense is None:
        raise NotFound(f"Expense with id {expense_id} not found")
    await db.delete(expense)
    await db.flush()


async def get_expenses(db: AsyncSession, filters: ExpenseFilter) -> list[Expense]:
    """Expenses matching the filters, newest first."""
    query = select(Expense).options(
        selectinload(Expense.car),
        selectinload(Expense.expense_type),
    )

    if filters.car_id:
        query = query.where(Expense.car_id == filters.car_id)
    if filters.expense_type_id:
        query = query.where(Expense.expense_type_id == filters.expense_type_id)
    if filters.has_period:
        start, end = month_bounds(filters.year, filters.month)
        query = query.where(Expense.expense_date >= start, Expense.expense_date < end)

    query = query.order_by(Expense.expense_date.desc(), Expense.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())
