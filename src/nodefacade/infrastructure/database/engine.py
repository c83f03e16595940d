"""Database engine setup for the backing content store.

SQLAlchemy Core (not ORM) is used: every store access is a short,
read-only statement and results are converted straight into frozen
domain records, so sessions and identity maps buy nothing.

Production stores already carry the repository tables and the facade
views. :func:`init_database` creates them on SQLite for local work and
tests.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url

from nodefacade.infrastructure.database.schema import (
    ATTRIBUTE_INDEX_FUNCTION,
    VIEW_DDL,
    metadata,
)

logger = logging.getLogger(__name__)


def attribute_index_from_region(region: str | None) -> int | None:
    """Extract the trailing integer of a category region name.

    Examples:
        >>> attribute_index_from_region("Attr_9000_2")
        2
        >>> attribute_index_from_region("Attr") is None
        True
    """
    if not region or "_" not in region:
        return None
    tail = region.rsplit("_", 1)[1]
    return int(tail) if tail.isdigit() else None


def create_db_engine(
    url: str,
    *,
    echo: bool = False,
    schema_name: str | None = None,
) -> Engine:
    """Create an engine for *url*.

    On SQLite every new connection gets WAL mode and the attribute index
    function the ``Facade_Attributes`` view relies on. When *schema_name*
    is set, unqualified tables are translated into that schema.
    """
    engine = create_engine(url, echo=echo)

    if make_url(url).get_backend_name() == "sqlite":

        @event.listens_for(engine, "connect")
        def _prepare_sqlite(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()
            dbapi_conn.create_function(
                ATTRIBUTE_INDEX_FUNCTION, 1, attribute_index_from_region, deterministic=True
            )

    if schema_name:
        logger.debug("Translating store tables into schema %s", schema_name)
        return engine.execution_options(schema_translate_map={None: schema_name})
    return engine


def init_database(engine: Engine) -> Engine:
    """Create the repository tables and facade views on *engine*.

    Idempotent: safe to call on an existing store.

    Returns the engine ready for use.
    """
    metadata.create_all(engine)
    with engine.begin() as conn:
        for ddl in VIEW_DDL:
            conn.execute(text(ddl))
    return engine
