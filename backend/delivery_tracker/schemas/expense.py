from datetime import date, datetime

from pydantic import BaseModel, Field

from delivery_tracker.schemas.common import PeriodFilter


class ExpenseCreate(BaseModel):
    car_id: int
    expense_type_id: int
    amount: float = Field(..., gt=0)
    description: str | None = Field(None, max_length=500)
    expense_date: date


class ExpenseResponse(BaseModel):
    id: int
    car_id: int
    expense_type_id: int
    amount: float
    description: str
    expense_date: date
    created_at: datetime

    # Joined fields
    car_number: str | None = None
    expense_type_name: str | None = None

    model_config = {"from_attributes": True}


class ExpenseFilter(PeriodFilter):
    car_id: int | None = None
    expense_type_id: int | None = None
