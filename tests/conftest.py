"""Test configuration and fixtures."""
import csv
import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from event_estimator.data.build_catalog import SEED_FILES
from event_estimator.engine.catalog import CatalogReader
from event_estimator.services.estimate_service import EstimateService
from event_estimator.storage.db import create_db_engine, init_db, make_session_factory
from event_estimator.storage.estimate_store import EstimateStore


SEED_DIR = Path(src_path) / 'event_estimator' / 'data' / 'seed'
EMPLOYER_ID = 'employer_test'


@pytest.fixture(scope="session")
def catalog():
    """The shipped seed catalog."""
    return CatalogReader(SEED_DIR)


@pytest.fixture
def store():
    """Estimate store over a fresh in-memory database."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield EstimateStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def service(catalog, store):
    return EstimateService(
        catalog=catalog,
        store=store,
        employer_id=EMPLOYER_ID,
        default_plan_id='plan_a_standard',
    )


@pytest.fixture
def client(catalog, service):
    """API client wired to the test catalog and service."""
    from fastapi.testclient import TestClient

    from event_estimator.api.main import app
    from event_estimator.api.state import get_catalog, get_estimate_service

    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_estimate_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def write_catalog(tmp_path):
    """
    Write a seed catalog to a temp dir.

    Takes rows per seed file (dicts keyed by column); files not given are
    written with headers only. Returns the directory.
    """
    def _write(**tables) -> Path:
        seed_dir = tmp_path / 'seed'
        seed_dir.mkdir(exist_ok=True)
        for name, (filename, columns) in SEED_FILES.items():
            with open(seed_dir / filename, 'w', encoding='utf-8', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=columns)
                writer.writeheader()
                for row in tables.get(name, []):
                    writer.writerow({c: row.get(c, '') for c in columns})
        return seed_dir

    return _write


def plan_row(plan_id='plan_x', base=10000, currency='EUR', approval='none', provider='prov_x'):
    return {
        'id': plan_id,
        'provider_id': provider,
        'name': plan_id.replace('_', ' ').title(),
        'description': 'Test plan',
        'base_price_cents': str(base),
        'currency': currency,
        'approval_type': approval,
        'min_participants': '10',
        'lead_time_days': '7',
    }


PROVIDER_ROW = {'id': 'prov_x', 'name': 'Test Venue', 'location': 'Berlin', 'logo_url': ''}
