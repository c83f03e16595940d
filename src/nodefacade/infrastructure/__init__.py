"""Infrastructure layer: store schema, engine, query compiler, caches, pool.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It may read domain records and the query AST but must never import from
services, commands, or output.
"""
