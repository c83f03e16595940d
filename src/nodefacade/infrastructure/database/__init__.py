"""Store engine, schema, and query compilation via SQLAlchemy Core."""

from nodefacade.infrastructure.database.compiler import CompiledQuery, QueryCompiler
from nodefacade.infrastructure.database.engine import create_db_engine, init_database
from nodefacade.infrastructure.database.schema import (
    cat_region_map,
    dtree_core,
    dvers_data,
    facade_attributes,
    facade_category,
    k_ini,
    ll_attr_data,
    metadata,
    views,
)

__all__ = [
    "CompiledQuery",
    "QueryCompiler",
    "cat_region_map",
    "create_db_engine",
    "dtree_core",
    "dvers_data",
    "facade_attributes",
    "facade_category",
    "init_database",
    "k_ini",
    "ll_attr_data",
    "metadata",
    "views",
]
