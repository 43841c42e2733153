from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.models.expense import Expense
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.expense import ExpenseCreate, ExpenseFilter, ExpenseResponse
from delivery_tracker.services import expense_service

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _expense_to_response(expense: Expense) -> ExpenseResponse:
    resp = ExpenseResponse.model_validate(expense)
    resp.car_number = expense.car.car_number if expense.car else None
    resp.expense_type_name = expense.expense_type.name if expense.expense_type else None
    return resp


@router.get("")
async def get_expenses(
    car_id: int | None = Query(None),
    expense_type_id: int | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[ExpenseResponse]]:
    filters = ExpenseFilter(
        car_id=car_id,
        expense_type_id=expense_type_id,
        month=month,
        year=year,
    )
    expenses = await expense_service.get_expenses(db, filters)
    return ApiResponse.ok(
        [_expense_to_response(e) for e in expenses],
        meta={"total": len(expenses)},
    )


@router.get("/{expense_id}")
async def get_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseResponse]:
    expense = await expense_service.get_expense(db, expense_id)
    return ApiResponse.ok(_expense_to_response(expense))


@router.post("")
async def create_expense(
    body: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseResponse]:
    expense = await expense_service.create_expense(db, body)
    return ApiResponse.ok(_expense_to_response(expense))


@router.put("/{expense_id}")
async def update_expense(
    expense_id: int,
    body: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseResponse]:
    expense = await expense_service.update_expense(db, expense_id, body)
    return ApiResponse.ok(_expense_to_response(expense))


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await expense_service.delete_expense(db, expense_id)
    return ApiResponse.ok(None)
