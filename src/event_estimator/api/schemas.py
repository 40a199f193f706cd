"""
Request/response models for the estimator API.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SelectionsPayload(BaseModel):
    """Wire form of selections: add-on ids plus one key per option code."""
    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {"addons": ["addon_av"], "seating_type": "reserved", "food_package": "full"}
        },
    )

    addons: list[Any] = Field(default_factory=list)


class UpdateEstimateRequest(BaseModel):
    plan_id: str = Field(min_length=1, examples=["plan_a_premium"])
    selections: SelectionsPayload = Field(default_factory=SelectionsPayload)


class ProviderResponse(BaseModel):
    id: str
    name: str
    location: str
    logo_url: Optional[str]


class ProvidersResponse(BaseModel):
    items: list[ProviderResponse]


class PlanOptionResponse(BaseModel):
    code: str
    description: Optional[str]
    required: bool
    values: list[str]


class PlanAddonResponse(BaseModel):
    id: str
    name: str
    price_cents: int
    currency: str


class PlanResponse(BaseModel):
    id: str
    provider_id: str
    name: str
    description: str
    base_price_cents: int
    currency: str
    approval_type: str
    min_participants: int
    lead_time_days: int
    options: list[PlanOptionResponse]
    addons: list[PlanAddonResponse]


class PlansResponse(BaseModel):
    items: list[PlanResponse]


class PricingResponse(BaseModel):
    base: int
    addons: int
    total: int
    currency: str


class EstimatePlanResponse(BaseModel):
    id: str
    name: str


class EstimateResponse(BaseModel):
    id: str
    status: str
    plan: EstimatePlanResponse
    selections: dict[str, Any]
    pricing: PricingResponse
    blocking_reasons: list[str]


class FinaliseEstimateResponse(BaseModel):
    id: str
    status: str


class ErrorBody(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorBody
