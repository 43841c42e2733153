from datetime import date, datetime

from pydantic import BaseModel, Field

from delivery_tracker.schemas.common import PeriodFilter


class EntryCreate(BaseModel):
    """Entry write payload. The billed amount is always computed server-side."""

    car_id: int
    route_id: int
    product_id: int
    quantity_tons: float = Field(..., gt=0)
    entry_date: date


class EntryResponse(BaseModel):
    id: int
    car_id: int
    route_id: int
    product_id: int
    quantity_tons: float
    unit_price: float
    calculated_amount: float
    entry_date: date
    created_at: datetime
    updated_at: datetime

    # Joined fields
    car_number: str | None = None
    route_name: str | None = None
    product_name: str | None = None

    model_config = {"from_attributes": True}


class EntryFilter(PeriodFilter):
    car_id: int | None = None
