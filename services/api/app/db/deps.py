from __future__ import annotations

from collections.abc import Generator

from services.api.app.db.database import db_session
from sqlalchemy.orm import Session


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; the checkout run and order reads share nothing else."""
    db = db_session()
    try:
        yield db
    finally:
        db.close()
