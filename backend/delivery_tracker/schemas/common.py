from typing import Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response envelope."""

    success: bool
    data: T | None = None
    error: str | None = None
    meta: dict | None = None

    @classmethod
    def ok(cls, data: T, meta: dict | None = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, meta=meta)

    @classmethod
    def fail(cls, error: str, meta: dict | None = None) -> "ApiResponse[None]":
        return cls(success=False, error=error, meta=meta)


class PeriodFilter(BaseModel):
    """Calendar-month filter. Applied only when both month and year are set."""

    month: int | None = Field(None, ge=1, le=12)
    year: int | None = Field(None, ge=1900, le=9999)

    @property
    def has_period(self) -> bool:
        return self.month is not None and self.year is not None

    @model_validator(mode="after")
    def _drop_half_period(self) -> "PeriodFilter":
        if not self.has_period:
            self.month = None
            self.year = None
        return self
