from pydantic import BaseModel, Field


class PricingUpsert(BaseModel):
    price_per_ton: float = Field(..., gt=0)
    is_available: bool = True


class BulkPricingItem(PricingUpsert):
    product_id: int


class BulkPricingRequest(BaseModel):
    route_id: int
    pricing: list[BulkPricingItem] = Field(..., min_length=1)


class PricingResponse(BaseModel):
    id: int
    route_id: int
    product_id: int
    price_per_ton: float
    is_available: bool | None

    model_config = {"from_attributes": True}


class ResolvedPriceResponse(BaseModel):
    route_id: int
    product_id: int
    base_price: float
    effective_price: float
    is_available: bool
    has_override: bool

    model_config = {"from_attributes": True}


class AvailableProduct(BaseModel):
    id: int
    name: str
    base_price: float
    effective_price: float
    is_available: bool = True


class RoutePricingRow(BaseModel):
    product_id: int
    product_name: str
    base_price: float
    pricing_id: int | None = None
    # Raw override values; None when the route has no override for the product
    price_per_ton: float | None = None
    override_available: bool | None = None
    # Resolved values
    effective_price: float
    is_available: bool
