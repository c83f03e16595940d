"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer, and define the camelCase JSON projection of a node that
the renderer caches and returns.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from nodefacade.domain.models import AttributeScalar, NodeDetails, NodeVersionDetails


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class _Projection(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class VersionProjection(_Projection):
    """One entry of a node projection's ``versions`` list."""

    version_id: int
    version: int
    create_date: datetime | None = None
    modify_date: datetime | None = None
    file_create_date: datetime | None = None
    file_modify_date: datetime | None = None
    filename: str | None = None
    size: int = 0
    mime_type: str | None = None

    @classmethod
    def from_version(cls, version: NodeVersionDetails) -> VersionProjection:
        return cls(
            version_id=version.version_id,
            version=version.version_number,
            create_date=version.create_date,
            modify_date=version.modify_date,
            file_create_date=version.file_create_date,
            file_modify_date=version.file_modify_date,
            filename=version.filename,
            size=version.size_bytes,
            mime_type=version.mime_type,
        )


class NodeProjection(_Projection):
    """Single-node JSON projection (no children).

    ``meta`` holds one ``{category: {attribute: value}}`` object per category.
    """

    parent_id: int
    data_id: int
    version_num: int
    name: str
    sub_type: int
    origin_data_id: int
    create_date: datetime | None
    modify_date: datetime | None
    is_alias: bool
    is_volume: bool
    is_document: bool
    is_folder: bool
    versions: list[VersionProjection]
    meta: list[dict[str, dict[str, AttributeScalar | None]]]
    has_versions: bool
    has_attributes: bool

    @classmethod
    def from_details(cls, details: NodeDetails) -> NodeProjection:
        core = details.core
        meta = [
            {category: {attr.attribute: attr.value for attr in attributes}}
            for category, attributes in details.attributes_by_category().items()
        ]
        return cls(
            parent_id=core.parent_id,
            data_id=core.data_id,
            version_num=core.version_num,
            name=core.name,
            sub_type=core.sub_type,
            origin_data_id=core.origin_data_id,
            create_date=core.create_date,
            modify_date=core.modify_date,
            is_alias=core.is_alias,
            is_volume=core.is_volume,
            is_document=core.is_document,
            is_folder=core.is_folder,
            versions=[VersionProjection.from_version(v) for v in details.versions],
            meta=meta,
            has_versions=details.has_versions,
            has_attributes=details.has_attributes,
        )


class QueryResultData(BaseModel):
    """Payload contract for ``QueryService.execute``."""

    query: str
    count: int
    ids: list[int]
    items: list[dict[str, Any]]


class ExplainResultData(BaseModel):
    """Payload contract for ``QueryService.explain``."""

    query: str
    tree: str
    sql: str
    parameters: dict[str, Any]
    matches_nothing: bool


class StateData(BaseModel):
    """Payload contract for ``StateService.state``."""

    system_identifier: str
    facade_version: str
    schema_version: str | None
    pool_size: int
    caches: dict[str, dict[str, Any]]
