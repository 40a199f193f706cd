import pytest
from sqlalchemy.exc import IntegrityError

from event_estimator.engine.models import Estimate, EstimateStatus, Pricing, Selections
from event_estimator.errors import EstimateNotFoundError


def make_estimate(estimate_id='est_1', employer_id='employer_a'):
    return Estimate(
        id=estimate_id,
        employer_id=employer_id,
        plan_id='plan_a_premium',
        status=EstimateStatus.DRAFT,
        selections=Selections.from_payload({'seating_type': 'open', 'addons': ['addon_av']}),
        pricing=Pricing(base=70000, addons=15000, total=85000, currency='EUR'),
    )


def test_create_and_fetch(store):
    with store.transaction() as session:
        store.create(session, make_estimate())

    with store.transaction() as session:
        estimate = store.get_by_employer(session, 'employer_a')

    assert estimate.id == 'est_1'
    assert estimate.status == EstimateStatus.DRAFT
    assert estimate.selections.addons == ('addon_av',)
    assert estimate.selections.get('seating_type') == 'open'
    assert estimate.pricing.to_dict() == {'base': 70000, 'addons': 15000, 'total': 85000, 'currency': 'EUR'}
    assert estimate.blocking_reasons == []
    assert estimate.created_at is not None


def test_unknown_employer_has_no_estimate(store):
    with store.transaction() as session:
        assert store.get_by_employer(session, 'nobody') is None


def test_one_estimate_per_employer(store):
    with store.transaction() as session:
        store.create(session, make_estimate('est_1'))

    with pytest.raises(IntegrityError):
        with store.transaction() as session:
            store.create(session, make_estimate('est_2'))


def test_replace_blockers_replaces_whole_set(store):
    with store.transaction() as session:
        store.create(session, make_estimate())
        store.replace_blockers(session, 'est_1', ['first', 'second', 'third'])

    with store.transaction() as session:
        store.replace_blockers(session, 'est_1', ['only'])

    with store.transaction() as session:
        assert store.list_blockers(session, 'est_1') == ['only']
        assert store.get_by_employer(session, 'employer_a').blocking_reasons == ['only']


def test_replace_blockers_keeps_order(store):
    reasons = ['Missing required field: seating_type', 'Invalid add-on IDs for this plan: x']
    with store.transaction() as session:
        store.create(session, make_estimate())
        store.replace_blockers(session, 'est_1', reasons)

    with store.transaction() as session:
        assert store.list_blockers(session, 'est_1') == reasons


def test_replace_blockers_with_empty_clears(store):
    with store.transaction() as session:
        store.create(session, make_estimate())
        store.replace_blockers(session, 'est_1', ['a'])
        store.replace_blockers(session, 'est_1', [])

    with store.transaction() as session:
        assert store.list_blockers(session, 'est_1') == []


def test_update_converts_domain_values(store):
    with store.transaction() as session:
        store.create(session, make_estimate())

    with store.transaction() as session:
        updated = store.update(
            session, 'est_1',
            plan_id='plan_a_standard',
            status=EstimateStatus.FINALISED,
            selections=Selections(),
            pricing=Pricing(base=50000, addons=0, total=50000, currency='EUR'),
        )

    assert updated.plan_id == 'plan_a_standard'
    assert updated.status == EstimateStatus.FINALISED
    assert updated.selections == Selections()
    assert updated.pricing.total == 50000


def test_update_missing_estimate(store):
    with pytest.raises(EstimateNotFoundError):
        with store.transaction() as session:
            store.update(session, 'est_missing', status=EstimateStatus.DRAFT)


def test_update_unknown_field(store):
    with store.transaction() as session:
        store.create(session, make_estimate())

    with pytest.raises(AttributeError):
        with store.transaction() as session:
            store.update(session, 'est_1', colour='blue')


def test_failed_transaction_writes_nothing(store):
    with store.transaction() as session:
        store.create(session, make_estimate())
        store.replace_blockers(session, 'est_1', ['kept'])

    with pytest.raises(RuntimeError):
        with store.transaction() as session:
            store.update(session, 'est_1', plan_id='plan_b_flex')
            store.replace_blockers(session, 'est_1', ['lost'])
            raise RuntimeError("boom")

    with store.transaction() as session:
        estimate = store.get_by_employer(session, 'employer_a')
    assert estimate.plan_id == 'plan_a_premium'
    assert estimate.blocking_reasons == ['kept']
