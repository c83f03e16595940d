"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, nodefacade.toml only contains
overrides. A local setup usually needs only ``[store] url``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt

# --- nodefacade.toml sections ---


class FacadeConfig(BaseModel):
    """[facade] section."""

    model_config = {"frozen": True}

    system_identifier: str = "hyperion"


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    url: str = "sqlite:///nodefacade.db"
    schema_name: str | None = None
    pool_size: PositiveInt = 8
    echo: bool = False


class CacheConfig(BaseModel):
    """[cache] section. Lifetimes are in seconds."""

    model_config = {"frozen": True}

    path_ttl: PositiveFloat = 3600.0
    detail_ttl: PositiveFloat = 300.0
    rendition_ttl: PositiveFloat = 300.0


class PathsConfig(BaseModel):
    """[paths] section."""

    model_config = {"frozen": True}

    # First-segment substitutions, e.g. {"ews" = "Enterprise/Projects"}.
    expansions: dict[str, str] = Field(default_factory=dict)


class TraversalConfig(BaseModel):
    """[traversal] section."""

    model_config = {"frozen": True}

    default_depth: int = Field(default=1, ge=0)
    max_depth: int = Field(default=3, ge=0)
    hidden_prefix: str = "_"


class QueryConfig(BaseModel):
    """[query] section."""

    model_config = {"frozen": True}

    strict_columns: bool = False
