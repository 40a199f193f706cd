"""
Catalog API - Providers and their plans with options and add-ons.
"""
from fastapi import APIRouter, Depends, Query

from ..engine.catalog import CatalogReader
from .schemas import ProvidersResponse, PlansResponse, ErrorResponse
from .state import get_catalog

router = APIRouter(tags=["catalog"])


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(catalog: CatalogReader = Depends(get_catalog)):
    """List all event providers."""
    return {
        "items": [
            {
                "id": p.id,
                "name": p.name,
                "location": p.location,
                "logo_url": p.logo_url,
            }
            for p in catalog.list_providers()
        ]
    }


@router.get(
    "/plans",
    response_model=PlansResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_plans(
    provider_id: str = Query(..., min_length=1, description="Provider ID", examples=["prov_a"]),
    catalog: CatalogReader = Depends(get_catalog),
):
    """List a provider's plans with their options and add-ons."""
    items = []
    for plan in catalog.list_plans(provider_id):
        options = [
            {
                "code": group.code,
                "description": group.description,
                "required": group.required,
                "values": [v.value for v in catalog.list_option_values(group.id)],
            }
            for group in catalog.list_option_groups(plan.id)
        ]
        items.append({
            "id": plan.id,
            "provider_id": plan.provider_id,
            "name": plan.name,
            "description": plan.description,
            "base_price_cents": plan.base_price_cents,
            "currency": plan.currency,
            "approval_type": plan.approval_type.value,
            "min_participants": plan.min_participants,
            "lead_time_days": plan.lead_time_days,
            "options": options,
            "addons": [
                {
                    "id": a.id,
                    "name": a.name,
                    "price_cents": a.price_cents,
                    "currency": a.currency,
                }
                for a in catalog.list_addons(plan.id)
            ],
        })
    return {"items": items}
