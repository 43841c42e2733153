from datetime import datetime

from pydantic import BaseModel, Field


# --- Routes ---


class RouteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)


class RouteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)


class RouteResponse(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Products ---


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price_per_ton: float = Field(..., gt=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    price_per_ton: float | None = Field(None, gt=0)


class ProductResponse(BaseModel):
    id: int
    name: str
    price_per_ton: float
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Cars ---


class CarCreate(BaseModel):
    car_number: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(None, max_length=500)


class CarUpdate(BaseModel):
    car_number: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=500)


class CarResponse(BaseModel):
    id: int
    car_number: str
    description: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Expense types ---


class ExpenseTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ExpenseTypeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)


class ExpenseTypeResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}
