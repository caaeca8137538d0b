from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from core.database import ENGINE
from models import Base


logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine | None = None) -> None:
    """Create the store tables if they are missing.

    Safe to run on every startup; existing tables are left as they are.
    """

    engine = engine or ENGINE
    Base.metadata.create_all(bind=engine)
    logger.info("Store schema ready (%d tables)", len(Base.metadata.tables))
