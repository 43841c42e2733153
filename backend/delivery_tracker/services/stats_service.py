"""Period rollups over entries and expenses, computed fresh on every call."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.models.car import Car
from delivery_tracker.models.entry import Entry
from delivery_tracker.models.expense import Expense
from delivery_tracker.models.expense_type import ExpenseType
from delivery_tracker.models.product import Product
from delivery_tracker.utils.date_helpers import month_bounds


def _period_conditions(column, year: int | None, month: int | None) -> list:
    if year is None or month is None:
        return []
    start, end = month_bounds(year, month)
    return [column >= start, column < end]


async def get_monthly_stats(
    db: AsyncSession,
    month: int | None = None,
    year: int | None = None,
    car_id: int | None = None,
) -> dict:
    """Entry totals and per-product breakdown for a month (all time if unset)."""
    conditions = _period_conditions(Entry.entry_date, year, month)
    if car_id:
        conditions.append(Entry.car_id == car_id)

    totals_result = await db.execute(
        select(
            func.count(Entry.id),
            func.coalesce(func.sum(Entry.quantity_tons), 0.0),
            func.coalesce(func.sum(Entry.calculated_amount), 0.0),
            func.coalesce(func.avg(Entry.calculated_amount), 0.0),
        ).where(*conditions)
    )
    total_entries, total_tons, total_revenue, avg_revenue = totals_result.one()

    breakdown_result = await db.execute(
        select(
            Product.id,
            Product.name,
            func.count(Entry.id).label("row_count"),
            func.sum(Entry.quantity_tons).label("total_tons"),
            func.sum(Entry.calculated_amount).label("total_revenue"),
        )
        .select_from(Entry)
        .join(Product, Entry.product_id == Product.id)
        .where(*conditions)
        .group_by(Product.id, Product.name)
        .order_by(func.sum(Entry.calculated_amount).desc(), Product.name)
    )
    product_breakdown = [
        {
            "product_id": row.id,
            "name": row.name,
            "count": int(row.row_count),
            "total_tons": float(row.total_tons),
            "total_revenue": float(row.total_revenue),
        }
        for row in breakdown_result.all()
    ]

    return {
        "month": month if year is not None else None,
        "year": year if month is not None else None,
        "car_id": car_id,
        "total_entries": int(total_entries),
        "total_tons": float(total_tons),
        "total_revenue": float(total_revenue),
        "avg_revenue": float(avg_revenue),
        "product_breakdown": product_breakdown,
    }


async def get_expense_stats(
    db: AsyncSession,
    car_id: int | None = None,
    month: int | None = None,
    year: int | None = None,
) -> dict:
    """Expense totals with per-type and per-car breakdowns.

    The car breakdown ignores ``car_id`` so every car of the period is shown.
    """
    period = _period_conditions(Expense.expense_date, year, month)
    conditions = list(period)
    if car_id:
        conditions.append(Expense.car_id == car_id)

    totals_result = await db.execute(
        select(
            func.count(Expense.id),
            func.coalesce(func.sum(Expense.amount), 0.0),
            func.coalesce(func.avg(Expense.amount), 0.0),
        ).where(*conditions)
    )
    total_expenses, total_amount, avg_amount = totals_result.one()

    type_result = await db.execute(
        select(
            ExpenseType.id,
            ExpenseType.name,
            func.count(Expense.id).label("row_count"),
            func.sum(Expense.amount).label("total_amount"),
        )
        .select_from(Expense)
        .join(ExpenseType, Expense.expense_type_id == ExpenseType.id)
        .where(*conditions)
        .group_by(ExpenseType.id, ExpenseType.name)
        .order_by(func.sum(Expense.amount).desc(), ExpenseType.name)
    )
    type_breakdown = [
        {
            "expense_type_id": row.id,
            "name": row.name,
            "count": int(row.row_count),
            "total_amount": float(row.total_amount),
        }
        for row in type_result.all()
    ]

    car_result = await db.execute(
        select(
            Car.id,
            Car.car_number,
            func.count(Expense.id).label("row_count"),
            func.sum(Expense.amount).label("total_amount"),
        )
        .select_from(Expense)
        .join(Car, Expense.car_id == Car.id)
        .where(*period)
        .group_by(Car.id, Car.car_number)
        .order_by(func.sum(Expense.amount).desc(), Car.car_number)
    )
    car_breakdown = [
        {
            "car_id": row.id,
            "car_number": row.car_number,
            "count": int(row.row_count),
            "total_amount": float(row.total_amount),
        }
        for row in car_result.all()
    ]

    return {
        "month": month if year is not None else None,
        "year": year if month is not None else None,
        "car_id": car_id,
        "total_expenses": int(total_expenses),
        "total_amount": float(total_amount),
        "avg_amount": float(avg_amount),
        "type_breakdown": type_breakdown,
        "car_breakdown": car_breakdown,
    }
