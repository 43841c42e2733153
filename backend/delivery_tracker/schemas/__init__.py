from delivery_tracker.schemas.common import ApiResponse, PeriodFilter
from delivery_tracker.schemas.registry import (
    CarCreate,
    CarResponse,
    CarUpdate,
    ExpenseTypeCreate,
    ExpenseTypeResponse,
    ExpenseTypeUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    RouteCreate,
    RouteResponse,
    RouteUpdate,
)
from delivery_tracker.schemas.pricing import (
    AvailableProduct,
    BulkPricingItem,
    BulkPricingRequest,
    PricingResponse,
    PricingUpsert,
    ResolvedPriceResponse,
    RoutePricingRow,
)
from delivery_tracker.schemas.entry import EntryCreate, EntryFilter, EntryResponse
from delivery_tracker.schemas.expense import ExpenseCreate, ExpenseFilter, ExpenseResponse
from delivery_tracker.schemas.stats import ExpenseStats, MonthlyStats
from delivery_tracker.schemas.user import AuthStatus, LoginRequest, UserResponse

__all__ = [
    "ApiResponse",
    "PeriodFilter",
    "RouteCreate",
    "RouteUpdate",
    "RouteResponse",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "CarCreate",
    "CarUpdate",
    "CarResponse",
    "ExpenseTypeCreate",
    "ExpenseTypeUpdate",
    "ExpenseTypeResponse",
    "PricingUpsert",
    "BulkPricingItem",
    "BulkPricingRequest",
    "PricingResponse",
    "ResolvedPriceResponse",
    "AvailableProduct",
    "RoutePricingRow",
    "EntryCreate",
    "EntryFilter",
    "EntryResponse",
    "ExpenseCreate",
    "ExpenseFilter",
    "ExpenseResponse",
    "MonthlyStats",
    "ExpenseStats",
    "AuthStatus",
    "LoginRequest",
    "UserResponse",
]
