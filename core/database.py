"""
core/database.py -- Process-wide cached connection handle for the document store.

The store is opened once and reused for the lifetime of the process. Every
request shares the same SQLAlchemy Engine (which owns its own connection
pool); nothing here opens a second handle or tears the engine down between
requests.

Pattern: lazily-initialized singleton via lru_cache, the same mechanism
core/config.get_settings() uses. get_engine() with no argument resolves
DATABASE_URL from settings; passing an explicit URL (tests, scripts) caches a
separate engine per URL.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, catalog/, or client/.
"""

import logging
from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine

from core.config import get_settings

logger = logging.getLogger("catalog.store")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


@lru_cache
def _engine_for(db_url: str) -> Engine:
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        # FastAPI runs sync handlers in a thread pool; the engine is shared.
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    logger.info("Opened store connection (%s)", engine.url.render_as_string(hide_password=True))
    return engine


def get_engine(db_url: Optional[str] = None) -> Engine:
    """Return the cached Engine for db_url (default: settings.database_url)."""
    return _engine_for(db_url or get_settings().database_url)


def ping(engine: Engine) -> bool:
    """Return True if the store answers a trivial query. Used by /health."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Store health check failed")
        return False

