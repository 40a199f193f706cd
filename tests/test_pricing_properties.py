"""
Property-based tests for the pricing and validation engines.

Selections are drawn from each seed plan's real option values and add-ons,
mixed with unknown values, foreign add-ons and unknown keys.
"""
import pytest
from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

from event_estimator.engine.catalog import CatalogReader
from event_estimator.engine.models import Selections
from event_estimator.engine.pricing_engine import PricingEngine
from event_estimator.engine.validation import ValidationEngine

from conftest import SEED_DIR


CATALOG = CatalogReader(SEED_DIR)
PLAN_IDS = [p.id for p in CATALOG.list_plans()]
ALL_ADDON_IDS = list(CATALOG.addons['id']) + ['addon_unknown']

junk_text = st.text(alphabet='abcxyz_019', min_size=1, max_size=8)


@st.composite
def plan_and_selections(draw):
    plan_id = draw(st.sampled_from(PLAN_IDS))
    payload = {}
    for group in CATALOG.list_option_groups(plan_id):
        values = [v.value for v in CATALOG.list_option_values(group.id)]
        choice = draw(st.one_of(
            st.none(),
            st.sampled_from(values),
            junk_text,
        ))
        if choice is not None:
            payload[group.code] = choice
    payload['addons'] = draw(st.lists(st.sampled_from(ALL_ADDON_IDS), max_size=5))
    if draw(st.booleans()):
        payload[draw(junk_text)] = draw(junk_text)
    return plan_id, Selections.from_payload(payload)


def expected_total(plan_id: str, selections: Selections) -> int:
    plan = CATALOG.get_plan(plan_id)
    addon_prices = {a.id: a.price_cents for a in CATALOG.list_addons(plan_id)}
    total = plan.base_price_cents + sum(addon_prices.get(a, 0) for a in set(selections.addons))
    for group in CATALOG.list_option_groups(plan_id):
        for value in CATALOG.list_option_values(group.id):
            if selections.get(group.code) == value.value and value.price_cents:
                total += value.price_cents
    return total


@settings(max_examples=150, suppress_health_check=[HealthCheck.too_slow])
@given(case=plan_and_selections())
def test_total_is_base_plus_addons_plus_matched_deltas(case):
    plan_id, selections = case
    pricing = PricingEngine(CATALOG).price(plan_id, selections)

    assert pricing.total == expected_total(plan_id, selections)
    assert pricing.total == pricing.base + pricing.addons + pricing.options
    assert pricing.options >= 0
    assert pricing.addons >= 0


@settings(max_examples=150, suppress_health_check=[HealthCheck.too_slow])
@given(case=plan_and_selections())
def test_foreign_addons_priced_at_zero_but_blocked(case):
    plan_id, selections = case
    own = {a.id for a in CATALOG.list_addons(plan_id)}
    foreign = [a for a in selections.addons if a not in own]

    pricing = PricingEngine(CATALOG).price(plan_id, selections)
    own_only = Selections(addons=tuple(a for a in selections.addons if a in own), options=selections.options)
    assert pricing.addons == PricingEngine(CATALOG).price(plan_id, own_only).addons

    blockers = ValidationEngine(CATALOG).validate(plan_id, selections).blockers
    addon_blockers = [b for b in blockers if b.startswith('Invalid add-on IDs')]
    if foreign:
        assert addon_blockers == [f"Invalid add-on IDs for this plan: {', '.join(foreign)}"]
    else:
        assert addon_blockers == []


@settings(max_examples=150, suppress_health_check=[HealthCheck.too_slow])
@given(case=plan_and_selections())
def test_one_missing_blocker_per_omitted_required_group(case):
    plan_id, selections = case
    blockers = ValidationEngine(CATALOG).validate(plan_id, selections).blockers

    for group in CATALOG.list_option_groups(plan_id):
        missing = f"Missing required field: {group.code}"
        expected = 1 if group.required and selections.get(group.code) is None else 0
        assert blockers.count(missing) == expected


@pytest.mark.parametrize("plan_id", [
    p.id for p in CATALOG.list_plans()
    if not CATALOG.list_option_groups(p.id) and not CATALOG.list_addons(p.id)
])
def test_plain_plans_cost_base(plan_id):
    pricing = PricingEngine(CATALOG).price(plan_id, Selections())
    assert pricing.total == pricing.base
