"""
Estimate API - The employer's current estimate.
"""
from fastapi import APIRouter, Depends

from ..services.estimate_service import EstimateService
from .schemas import (
    UpdateEstimateRequest,
    EstimateResponse,
    FinaliseEstimateResponse,
    ErrorResponse,
)
from .state import get_estimate_service

router = APIRouter(prefix="/estimate", tags=["estimates"])


@router.get(
    "",
    response_model=EstimateResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_estimate(service: EstimateService = Depends(get_estimate_service)):
    """Get the current estimate, creating a default draft if none exists."""
    return service.get_current().to_dict()


@router.put(
    "",
    response_model=EstimateResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def update_estimate(
    body: UpdateEstimateRequest,
    service: EstimateService = Depends(get_estimate_service),
):
    """
    Update the current estimate with a plan and selections.

    Selections that break the plan's rules are still priced; the problems
    come back as blocking_reasons.
    """
    view = service.update_from_payload(body.plan_id, body.selections.model_dump())
    return view.to_dict()


@router.post(
    "/finalise",
    response_model=FinaliseEstimateResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def finalise_estimate(service: EstimateService = Depends(get_estimate_service)):
    """
    Finalise the current estimate. Plans that need approval move to
    pending_approval, the rest to finalised.
    """
    return service.finalise().to_dict()
