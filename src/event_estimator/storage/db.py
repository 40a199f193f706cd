"""
Database engine & session factory for the estimate store.
"""
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.settings import get_settings


logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for the estimate store.

    SQLite URLs get a connection shared across threads (in-memory databases
    need a single static connection to survive between sessions).
    """
    url = database_url or get_settings().database_url
    kwargs = {"echo": echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            _ensure_sqlite_dir(url)
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)

    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def _ensure_sqlite_dir(url: str):
    path = Path(url.split("sqlite:///", 1)[-1])
    path.parent.mkdir(parents=True, exist_ok=True)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine):
    """Create the estimate and blocker tables if they do not exist."""
    from . import tables  # noqa: F401  registers the mappings on Base

    Base.metadata.create_all(engine)
    logger.info("Estimate store ready at %s", engine.url.render_as_string(hide_password=True))
