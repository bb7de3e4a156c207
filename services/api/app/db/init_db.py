from __future__ import annotations

import os

import structlog
from services.api.app.db.database import get_engine
from services.api.app.db.models import Base

logger = structlog.get_logger(__name__)


def _auto_create_enabled() -> bool:
    return os.getenv("BAZAAR_DB_AUTO_CREATE", "true").strip().lower() in {"1", "true", "yes", "y"}


def init_db() -> list[str]:
    """Create any missing tables and return the table names the app expects."""

    tables = sorted(Base.metadata.tables)
    if not _auto_create_enabled():
        logger.info("db_auto_create_disabled")
        return tables

    Base.metadata.create_all(bind=get_engine())
    logger.debug("db_initialized", tables=tables)
    return tables
