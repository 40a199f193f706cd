"""
Estimate Service - Get, update and finalise the employer's current estimate.

Each employer has exactly one estimate, fetched or created on first use.
Update and finalise for one employer are serialised and each runs in a
single store transaction, so selections, pricing and blockers are always
written together or not at all.
"""
import logging
import threading
import uuid
from collections import defaultdict
from typing import Any, Optional

from ..engine.catalog import CatalogReader
from ..engine.models import (
    Estimate,
    EstimateStatus,
    EstimateView,
    FinaliseResult,
    Selections,
)
from ..engine.pricing_engine import PricingEngine
from ..engine.validation import ValidationEngine
from ..errors import EstimatorError, EstimateNotFoundError, FinaliseBlockedError
from ..storage.estimate_store import EstimateStore
from ..storage.tables import utcnow


logger = logging.getLogger(__name__)


def new_estimate_id() -> str:
    return f"est_{uuid.uuid4().hex[:12]}"


class EstimateService:
    """Lifecycle operations over the current estimate of one employer."""

    def __init__(
        self,
        catalog: CatalogReader,
        store: EstimateStore,
        employer_id: str,
        default_plan_id: Optional[str] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.employer_id = employer_id
        self.default_plan_id = default_plan_id

        self.validator = ValidationEngine(catalog)
        self.pricer = PricingEngine(catalog)

        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, employer_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[employer_id]

    def get_current(self) -> EstimateView:
        """
        Return the employer's estimate, creating a draft for the default
        plan if there is none yet.
        """
        with self._lock_for(self.employer_id), self.store.transaction() as session:
            estimate = self.store.get_by_employer(session, self.employer_id)
            if estimate is None:
                plan = self.catalog.default_plan(self.default_plan_id)
                if plan is None:
                    raise EstimatorError("No plans available")
                estimate = self._apply(session, None, plan.id, Selections())
                logger.info(
                    "Created estimate %s for employer %s on plan %s",
                    estimate.id, self.employer_id, plan.id,
                )
            return self._view(estimate)

    def update(self, plan_id: str, selections: Selections) -> EstimateView:
        """
        Re-point the estimate at a plan and selection set.

        Validation and pricing both run on the input; the blocker set is
        replaced wholesale. The estimate goes back to draft.

        Raises:
            PlanNotFoundError: If the plan does not exist (nothing is written)
        """
        with self._lock_for(self.employer_id), self.store.transaction() as session:
            current = self.store.get_by_employer(session, self.employer_id)
            estimate = self._apply(session, current, plan_id, selections)

        logger.info(
            "Updated estimate %s: plan=%s blockers=%d total=%d %s",
            estimate.id, plan_id, len(estimate.blocking_reasons),
            estimate.pricing.total, estimate.pricing.currency,
        )
        return self._view(estimate)

    def update_from_payload(self, plan_id: str, raw_selections: Optional[dict[str, Any]]) -> EstimateView:
        """Update from the wire form of selections."""
        return self.update(plan_id, Selections.from_payload(raw_selections))

    def finalise(self) -> FinaliseResult:
        """
        Submit the estimate.

        Plans with manager review go to pending_approval; others are
        finalised straight away.

        Raises:
            EstimateNotFoundError: If the employer has no estimate
            FinaliseBlockedError: If the stored blocker set is not empty
            EstimatorError: If the estimate's plan has disappeared
        """
        with self._lock_for(self.employer_id), self.store.transaction() as session:
            estimate = self.store.get_by_employer(session, self.employer_id)
            if estimate is None:
                raise EstimateNotFoundError()

            if estimate.blocking_reasons:
                logger.info(
                    "Finalise of estimate %s blocked by %d reason(s)",
                    estimate.id, len(estimate.blocking_reasons),
                )
                raise FinaliseBlockedError(estimate.blocking_reasons)

            plan = self.catalog.get_plan(estimate.plan_id)
            if plan is None:
                raise EstimatorError("Plan not found")

            now = utcnow()
            if plan.requires_approval:
                updated = self.store.update(
                    session, estimate.id,
                    status=EstimateStatus.PENDING_APPROVAL,
                    submitted_at=now,
                    finalised_at=None,
                )
            else:
                updated = self.store.update(
                    session, estimate.id,
                    status=EstimateStatus.FINALISED,
                    submitted_at=now,
                    finalised_at=now,
                )

        logger.info("Estimate %s is now %s", updated.id, updated.status.value)
        return FinaliseResult(id=updated.id, status=updated.status)

    def _apply(
        self,
        session,
        current: Optional[Estimate],
        plan_id: str,
        selections: Selections,
    ) -> Estimate:
        """Validate, price and write one selection set inside a transaction."""
        validation = self.validator.validate(plan_id, selections)
        pricing = self.pricer.price(plan_id, selections)

        if current is None:
            estimate = self.store.create(session, Estimate(
                id=new_estimate_id(),
                employer_id=self.employer_id,
                plan_id=plan_id,
                status=EstimateStatus.DRAFT,
                selections=selections,
                pricing=pricing,
            ))
        else:
            estimate = self.store.update(
                session, current.id,
                plan_id=plan_id,
                status=EstimateStatus.DRAFT,
                selections=selections,
                pricing=pricing,
                submitted_at=None,
                finalised_at=None,
            )

        self.store.replace_blockers(session, estimate.id, validation.blockers)
        estimate.blocking_reasons = list(validation.blockers)
        estimate.pricing = pricing
        return estimate

    def _view(self, estimate: Estimate) -> EstimateView:
        plan = self.catalog.get_plan(estimate.plan_id)
        if plan is None:
            raise EstimatorError("Plan not found")
        return EstimateView(
            id=estimate.id,
            status=estimate.status,
            plan_id=plan.id,
            plan_name=plan.name,
            selections=estimate.selections,
            pricing=estimate.pricing,
            blocking_reasons=estimate.blocking_reasons,
        )
