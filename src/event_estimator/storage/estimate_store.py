"""
Estimate Store - Keyed persistence for estimates and their blockers.

One estimate per employer id. Every method works inside a session handed
out by transaction(), so a caller can combine several writes (estimate
fields + blocker replacement) into one atomic unit.
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy.orm import Session, sessionmaker

from ..engine.models import Estimate, EstimateStatus, Pricing, Selections
from ..errors import EstimateNotFoundError
from .tables import EstimateRow, BlockerRow, utcnow


logger = logging.getLogger(__name__)


class EstimateStore:
    """Estimates keyed by employer id, with replace-all blocker sets."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Yield a session; commit when the block succeeds, roll back if it
        raises. Nothing written inside a failed block is kept.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_by_employer(self, session: Session, employer_id: str) -> Optional[Estimate]:
        row = session.query(EstimateRow).filter(EstimateRow.employer_id == employer_id).one_or_none()
        if row is None:
            return None
        return self._to_estimate(row, self.list_blockers(session, row.id))

    def create(self, session: Session, estimate: Estimate) -> Estimate:
        now = utcnow()
        row = EstimateRow(
            id=estimate.id,
            employer_id=estimate.employer_id,
            plan_id=estimate.plan_id,
            status=estimate.status.value,
            selections=estimate.selections.to_dict(),
            pricing=estimate.pricing.to_dict(),
            submitted_at=estimate.submitted_at,
            finalised_at=estimate.finalised_at,
            created_at=now,
            updated_at=now,
        )
        session.add(row)
        session.flush()
        logger.debug("Created estimate %s for employer %s", row.id, row.employer_id)
        return self._to_estimate(row, [])

    def update(self, session: Session, estimate_id: str, **fields) -> Estimate:
        """
        Update estimate fields.

        Accepts plan_id, status, selections, pricing, submitted_at and
        finalised_at; domain objects are converted to their stored form.
        """
        row = session.get(EstimateRow, estimate_id)
        if row is None:
            raise EstimateNotFoundError(f"Estimate {estimate_id} not found")

        for key, value in fields.items():
            if key == 'selections' and isinstance(value, Selections):
                value = value.to_dict()
            elif key == 'pricing' and isinstance(value, Pricing):
                value = value.to_dict()
            elif key == 'status' and isinstance(value, EstimateStatus):
                value = value.value
            if not hasattr(row, key):
                raise AttributeError(f"Estimate has no field '{key}'")
            setattr(row, key, value)
        row.updated_at = utcnow()

        session.flush()
        return self._to_estimate(row, self.list_blockers(session, row.id))

    def replace_blockers(self, session: Session, estimate_id: str, reasons: list[str]):
        """Set the blockers of an estimate to exactly these reasons."""
        session.query(BlockerRow).filter(BlockerRow.estimate_id == estimate_id).delete(
            synchronize_session=False
        )
        session.add_all([
            BlockerRow(
                id=f"blocker_{estimate_id}_{index}",
                estimate_id=estimate_id,
                position=index,
                reason=reason,
            )
            for index, reason in enumerate(reasons)
        ])
        session.flush()

    def list_blockers(self, session: Session, estimate_id: str) -> list[str]:
        rows = (
            session.query(BlockerRow)
            .filter(BlockerRow.estimate_id == estimate_id)
            .order_by(BlockerRow.position)
            .all()
        )
        return [row.reason for row in rows]

    @staticmethod
    def _to_estimate(row: EstimateRow, blockers: list[str]) -> Estimate:
        return Estimate(
            id=row.id,
            employer_id=row.employer_id,
            plan_id=row.plan_id,
            status=EstimateStatus(row.status),
            selections=Selections.from_payload(row.selections),
            pricing=Pricing.from_dict(row.pricing),
            blocking_reasons=blockers,
            created_at=row.created_at,
            updated_at=row.updated_at,
            submitted_at=row.submitted_at,
            finalised_at=row.finalised_at,
        )
