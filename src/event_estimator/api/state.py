"""
Shared API state - one catalog and one estimate service per process.

Used as FastAPI dependencies so tests can swap them through
app.dependency_overrides.
"""
import threading
from typing import Optional

from ..config.settings import get_settings
from ..engine.catalog import CatalogReader
from ..services.estimate_service import EstimateService
from ..storage.db import create_db_engine, init_db, make_session_factory
from ..storage.estimate_store import EstimateStore


_catalog: Optional[CatalogReader] = None
_service: Optional[EstimateService] = None
_init_lock = threading.Lock()


def get_catalog() -> CatalogReader:
    """Get the process-wide catalog reader."""
    global _catalog
    with _init_lock:
        if _catalog is None:
            _catalog = CatalogReader(get_settings().seed_dir)
        return _catalog


def get_estimate_service() -> EstimateService:
    """Get the process-wide estimate service, creating the store on first use."""
    global _service
    catalog = get_catalog()
    with _init_lock:
        if _service is None:
            settings = get_settings()
            engine = create_db_engine(settings.database_url)
            init_db(engine)
            _service = EstimateService(
                catalog=catalog,
                store=EstimateStore(make_session_factory(engine)),
                employer_id=settings.employer_id,
                default_plan_id=settings.default_plan_id,
            )
        return _service
