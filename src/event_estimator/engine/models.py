"""
Data models for the estimate engine.

Uses dataclasses for structured, type-safe data representation. Catalog
records are built from seed CSV rows; selections, pricing and estimates
travel between the engines, the store and the API.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ApprovalType(str, Enum):
    NONE = "none"
    MANAGER_REVIEW = "manager_review"


class EstimateStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    QUOTE_AVAILABLE = "quote_available"
    PENDING_APPROVAL = "pending_approval"
    FINALISED = "finalised"
    REJECTED = "rejected"
    EXPIRED = "expired"


def _optional_int(raw: str) -> Optional[int]:
    raw = str(raw).strip()
    return int(raw) if raw else None


@dataclass
class Provider:
    """An event venue operator."""
    id: str
    name: str
    location: str = ""
    logo_url: Optional[str] = None

    @classmethod
    def from_csv_row(cls, row: dict) -> 'Provider':
        return cls(
            id=row['id'],
            name=row['name'],
            location=row.get('location', ''),
            logo_url=row.get('logo_url') or None,
        )


@dataclass
class Plan:
    """A purchasable package offered by a provider."""
    id: str
    provider_id: str
    name: str
    description: str
    base_price_cents: int
    currency: str
    approval_type: ApprovalType = ApprovalType.NONE
    min_participants: int = 0
    lead_time_days: int = 0

    @property
    def requires_approval(self) -> bool:
        return self.approval_type == ApprovalType.MANAGER_REVIEW

    @classmethod
    def from_csv_row(cls, row: dict) -> 'Plan':
        return cls(
            id=row['id'],
            provider_id=row['provider_id'],
            name=row['name'],
            description=row.get('description', ''),
            base_price_cents=int(row['base_price_cents']),
            currency=row['currency'],
            approval_type=ApprovalType(row.get('approval_type') or 'none'),
            min_participants=_optional_int(row.get('min_participants', '')) or 0,
            lead_time_days=_optional_int(row.get('lead_time_days', '')) or 0,
        )


@dataclass
class OptionGroup:
    """A plan-scoped configuration axis, e.g. seating_type."""
    id: str
    plan_id: str
    code: str
    description: Optional[str] = None
    required: bool = False

    @classmethod
    def from_csv_row(cls, row: dict) -> 'OptionGroup':
        return cls(
            id=row['id'],
            plan_id=row['plan_id'],
            code=row['code'],
            description=row.get('description') or None,
            required=str(row.get('required', 'false')).lower() == 'true',
        )


@dataclass
class OptionValue:
    """A selectable token within an option group."""
    id: str
    option_group_id: str
    value: str
    price_cents: Optional[int] = None
    currency: Optional[str] = None

    @classmethod
    def from_csv_row(cls, row: dict) -> 'OptionValue':
        return cls(
            id=row['id'],
            option_group_id=row['option_group_id'],
            value=row['value'],
            price_cents=_optional_int(row.get('price_cents', '')),
            currency=row.get('currency') or None,
        )


@dataclass
class Addon:
    """An optional fixed-price extra scoped to one plan."""
    id: str
    plan_id: str
    name: str
    price_cents: int
    currency: str

    @classmethod
    def from_csv_row(cls, row: dict) -> 'Addon':
        return cls(
            id=row['id'],
            plan_id=row['plan_id'],
            name=row['name'],
            price_cents=int(row['price_cents']),
            currency=row['currency'],
        )


@dataclass(frozen=True)
class Selections:
    """
    A buyer's choices for one plan.

    ``addons`` holds add-on ids in selection order without duplicates;
    ``options`` maps option-group code to the single chosen value.
    """
    addons: tuple[str, ...] = ()
    options: dict[str, str] = field(default_factory=dict)

    def get(self, code: str) -> Optional[str]:
        """Return the chosen value for an option code, or None if unset."""
        return self.options.get(code)

    @classmethod
    def from_payload(cls, payload: Optional[dict[str, Any]]) -> 'Selections':
        """
        Build selections from the wire mapping
        ``{"addons": [...], <code>: <value>, ...}``.

        Non-string add-on ids are dropped. Scalars under option codes are
        kept as strings; empty strings, nulls, lists and objects count as
        "not selected".
        """
        payload = payload or {}

        raw_addons = payload.get('addons')
        addons: list[str] = []
        if isinstance(raw_addons, (list, tuple)):
            for addon_id in raw_addons:
                if isinstance(addon_id, str) and addon_id not in addons:
                    addons.append(addon_id)

        options = {}
        for code, value in payload.items():
            if code == 'addons':
                continue
            if isinstance(value, bool):
                value = str(value).lower()
            elif isinstance(value, float) and value.is_integer():
                value = str(int(value))
            elif isinstance(value, (int, float)):
                value = str(value)
            if isinstance(value, str) and value:
                options[code] = value

        return cls(addons=tuple(addons), options=options)

    def to_dict(self) -> dict[str, Any]:
        """Wire/persisted form: ``addons`` plus one key per option code."""
        data: dict[str, Any] = {'addons': list(self.addons)}
        data.update(self.options)
        return data


@dataclass
class PriceLine:
    """A single itemised component of a price."""
    kind: str  # "base", "addon" or "option"
    code: str
    description: str
    amount_cents: int


@dataclass
class Pricing:
    """Price breakdown for a plan and a set of selections."""
    base: int
    addons: int
    total: int
    currency: str
    lines: list[PriceLine] = field(default_factory=list)

    @property
    def options(self) -> int:
        """Sum of matched option-value deltas."""
        return self.total - self.base - self.addons

    def to_dict(self) -> dict[str, Any]:
        return {
            'base': self.base,
            'addons': self.addons,
            'total': self.total,
            'currency': self.currency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Pricing':
        return cls(
            base=int(data['base']),
            addons=int(data['addons']),
            total=int(data['total']),
            currency=str(data['currency']),
        )


@dataclass
class ValidationResult:
    """Outcome of validating selections against a plan."""
    is_valid: bool
    blockers: list[str] = field(default_factory=list)


@dataclass
class Estimate:
    """The per-employer, in-progress configuration-and-price snapshot."""
    id: str
    employer_id: str
    plan_id: str
    status: EstimateStatus
    selections: Selections
    pricing: Pricing
    blocking_reasons: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    finalised_at: Optional[datetime] = None


@dataclass
class EstimateView:
    """What callers see of the current estimate."""
    id: str
    status: EstimateStatus
    plan_id: str
    plan_name: str
    selections: Selections
    pricing: Pricing
    blocking_reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'status': self.status.value,
            'plan': {'id': self.plan_id, 'name': self.plan_name},
            'selections': self.selections.to_dict(),
            'pricing': self.pricing.to_dict(),
            'blocking_reasons': list(self.blocking_reasons),
        }


@dataclass
class FinaliseResult:
    id: str
    status: EstimateStatus

    def to_dict(self) -> dict[str, Any]:
        return {'id': self.id, 'status': self.status.value}
