"""
Hard-failure exceptions for the estimator.

Blockers are never raised; they are returned as data by the validation
engine. Everything here is a fault that the API layer renders as
``{"error": {"code": ..., "message": ...}}``.
"""
from typing import Optional


class EstimatorError(Exception):
    """Base class for estimator faults."""
    code = "internal_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class CatalogError(EstimatorError):
    """The seed catalog is missing or breaks an integrity check."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(EstimatorError):
    code = "not_found"
    status_code = 404


class PlanNotFoundError(NotFoundError):
    def __init__(self, plan_id: str):
        super().__init__(f"Plan {plan_id} not found")
        self.plan_id = plan_id


class EstimateNotFoundError(NotFoundError):
    def __init__(self, message: str = "No estimate found"):
        super().__init__(message)


class EstimateValidationError(EstimatorError):
    code = "validation_error"
    status_code = 400


class FinaliseBlockedError(EstimateValidationError):
    """Finalisation refused because the estimate still has blockers."""

    def __init__(self, blockers: list[str]):
        super().__init__(f"Cannot finalise estimate: {'; '.join(blockers)}")
        self.blockers = list(blockers)
