"""Schema creation for the league database."""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from models import Base

LOGGER = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> None:
    """Create all league tables and indexes that do not exist yet."""
    with engine.begin() as connection:
        existing_tables = set(inspect(connection).get_table_names())
        missing = [name for name in Base.metadata.tables if name not in existing_tables]
        Base.metadata.create_all(bind=connection, checkfirst=True)
    if missing:
        LOGGER.info("Created tables: %s", ", ".join(sorted(missing)))


__all__ = ["ensure_schema"]
