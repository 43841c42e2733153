from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.registry import (
    ExpenseTypeCreate,
    ExpenseTypeResponse,
    ExpenseTypeUpdate,
)
from delivery_tracker.services.registry_service import expense_types

router = APIRouter(prefix="/expense-types", tags=["expense-types"])


@router.get("")
async def list_expense_types(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[ExpenseTypeResponse]]:
    items = await expense_types.list(db)
    return ApiResponse.ok([ExpenseTypeResponse.model_validate(t) for t in items])


@router.get("/{expense_type_id}")
async def get_expense_type(
    expense_type_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseTypeResponse]:
    expense_type = await expense_types.get(db, expense_type_id)
    return ApiResponse.ok(ExpenseTypeResponse.model_validate(expense_type))


@router.post("")
async def create_expense_type(
    body: ExpenseTypeCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseTypeResponse]:
    expense_type = await expense_types.create(db, body)
    return ApiResponse.ok(ExpenseTypeResponse.model_validate(expense_type))


@router.put("/{expense_type_id}")
async def update_expense_type(
    expense_type_id: int,
    body: ExpenseTypeUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseTypeResponse]:
    expense_type = await expense_types.update(db, expense_type_id, body)
    return ApiResponse.ok(ExpenseTypeResponse.model_validate(expense_type))


@router.delete("/{expense_type_id}")
async def delete_expense_type(
    expense_type_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await expense_types.delete(db, expense_type_id)
    return ApiResponse.ok(None)
