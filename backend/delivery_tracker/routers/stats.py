from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.database import get_db
from delivery_tracker.schemas.common import ApiResponse, PeriodFilter
from delivery_tracker.schemas.stats import ExpenseStats, MonthlyStats
from delivery_tracker.services import stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/monthly")
async def get_monthly_stats(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    car_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MonthlyStats]:
    period = PeriodFilter(month=month, year=year)
    stats = await stats_service.get_monthly_stats(db, period.month, period.year, car_id)
    return ApiResponse.ok(MonthlyStats(**stats))


@router.get("/expenses")
async def get_expense_stats(
    car_id: int | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ExpenseStats]:
    period = PeriodFilter(month=month, year=year)
    stats = await stats_service.get_expense_stats(db, car_id, period.month, period.year)
    return ApiResponse.ok(ExpenseStats(**stats))
