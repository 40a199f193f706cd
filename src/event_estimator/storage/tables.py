"""
Table mappings for estimates and their blockers.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EstimateRow(Base):
    __tablename__ = "event_estimate"
    __table_args__ = (
        UniqueConstraint("employer_id", name="uq_event_estimate_employer"),
    )

    id = Column(String, primary_key=True)
    employer_id = Column(String, nullable=False, index=True)
    plan_id = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")

    selections = Column(JSON, nullable=False, default=dict)
    pricing = Column(JSON, nullable=False, default=dict)

    submitted_at = Column(DateTime(timezone=True), nullable=True)
    finalised_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class BlockerRow(Base):
    __tablename__ = "estimate_blocker"

    id = Column(String, primary_key=True)
    estimate_id = Column(String, ForeignKey("event_estimate.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    reason = Column(Text, nullable=False)
