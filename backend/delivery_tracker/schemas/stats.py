from pydantic import BaseModel


class ProductBreakdownItem(BaseModel):
    product_id: int
    name: str
    count: int
    total_tons: float
    total_revenue: float


class MonthlyStats(BaseModel):
    month: int | None
    year: int | None
    car_id: int | None
    total_entries: int
    total_tons: float
    total_revenue: float
    avg_revenue: float
    product_breakdown: list[ProductBreakdownItem]


class ExpenseTypeBreakdownItem(BaseModel):
    expense_type_id: int
    name: str
    count: int
    total_amount: float


class CarBreakdownItem(BaseModel):
    car_id: int
    car_number: str
    count: int
    total_amount: float


class ExpenseStats(BaseModel):
    month: int | None
    year: int | None
    car_id: int | None
    total_expenses: int
    total_amount: float
    avg_amount: float
    type_breakdown: list[ExpenseTypeBreakdownItem]
    car_breakdown: list[CarBreakdownItem]
