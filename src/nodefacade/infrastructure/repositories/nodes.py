"""Read-only repository over the content repository tables."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, and_, select
from sqlalchemy.engine import Engine

from nodefacade.infrastructure.database.compiler import RESULT_COLUMN
from nodefacade.infrastructure.database.schema import (
    dtree_core,
    dvers_data,
    facade_attributes,
    k_ini,
    ll_attr_data,
)

# Typed value slots in the order a populated slot wins when a row carries several.
VALUE_SLOT_PRECEDENCE = ("val_int", "val_long", "val_real", "val_string", "val_date")

_CORE_COLUMNS = (
    dtree_core.c.ParentID.label("parent_id"),
    dtree_core.c.DataID.label("data_id"),
    dtree_core.c.VersionNum.label("version_num"),
    dtree_core.c.Name.label("name"),
    dtree_core.c.SubType.label("sub_type"),
    dtree_core.c.OriginDataID.label("origin_data_id"),
    dtree_core.c.CreateDate.label("create_date"),
    dtree_core.c.ModifyDate.label("modify_date"),
)


def _single_slot(row: dict[str, Any]) -> dict[str, Any]:
    """Keep only the highest-precedence populated value slot of *row*."""
    kept = next((slot for slot in VALUE_SLOT_PRECEDENCE if row.get(slot) is not None), None)
    return {
        key: (value if key not in VALUE_SLOT_PRECEDENCE or key == kept else None)
        for key, value in row.items()
    }


def _core_row(row: Any) -> dict[str, Any]:
    data = dict(row)
    if data.get("origin_data_id") is None:
        data["origin_data_id"] = 0
    return data


class NodeStore:
    """Encapsulates SQL for node lookups and compiled queries.

    Every method opens its own connection; the store is never written to.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def schema_version(self) -> str | None:
        """The repository's ``DatabaseVersion`` setting, if recorded."""
        stmt = select(k_ini.c.IniValue).where(k_ini.c.IniKeyword == "DatabaseVersion")
        with self._engine.connect() as conn:
            value = conn.execute(stmt).scalar()
        return str(value) if value is not None else None

    def find_child(self, parent_id: int, name: str) -> dict[str, Any] | None:
        """Fetch the live, positive-id child of *parent_id* named *name*."""
        stmt = (
            select(*_CORE_COLUMNS)
            .where(
                dtree_core.c.ParentID == parent_id,
                dtree_core.c.Name == name,
                dtree_core.c.DataID > 0,
                dtree_core.c.Deleted == 0,
            )
            .order_by(dtree_core.c.DataID)
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _core_row(row) if row is not None else None

    def get_core(self, node_id: int) -> dict[str, Any] | None:
        """Fetch one live core row by id."""
        stmt = select(*_CORE_COLUMNS).where(
            dtree_core.c.DataID == node_id,
            dtree_core.c.Deleted == 0,
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _core_row(row) if row is not None else None

    def child_ids(self, parent_id: int) -> list[int]:
        """Positive ids of the live children of *parent_id*, ordered by name."""
        stmt = (
            select(dtree_core.c.DataID)
            .where(
                dtree_core.c.ParentID == parent_id,
                dtree_core.c.DataID > 0,
                dtree_core.c.Deleted == 0,
            )
            .order_by(dtree_core.c.Name, dtree_core.c.DataID)
        )
        with self._engine.connect() as conn:
            return [int(node_id) for node_id in conn.execute(stmt).scalars()]

    def get_versions(self, node_id: int) -> list[dict[str, Any]]:
        """Version rows of *node_id*, ordered by version number."""
        stmt = (
            select(
                dvers_data.c.VersionID.label("version_id"),
                dvers_data.c.Version.label("version_number"),
                dvers_data.c.VerCDate.label("create_date"),
                dvers_data.c.VerMDate.label("modify_date"),
                dvers_data.c.FileCDate.label("file_create_date"),
                dvers_data.c.FileMDate.label("file_modify_date"),
                dvers_data.c.FileName.label("filename"),
                dvers_data.c.DataSize.label("size_bytes"),
                dvers_data.c.MimeType.label("mime_type"),
            )
            .where(dvers_data.c.DocID == node_id)
            .order_by(dvers_data.c.Version)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [{**row, "size_bytes": row["size_bytes"] or 0} for row in rows]

    def get_attributes(self, node_id: int) -> list[dict[str, Any]]:
        """Current attribute values of *node_id*.

        Only rows stored against the node's current version and the
        category's current definition version are returned.
        """
        node = dtree_core.alias("a")
        value = ll_attr_data.alias("b")
        joined = node.join(
            value,
            and_(node.c.DataID == value.c.ID, node.c.VersionNum == value.c.VerNum),
        ).join(
            facade_attributes,
            and_(
                value.c.DefID == facade_attributes.c.CategoryId,
                value.c.DefVerN == facade_attributes.c.CategoryVersion,
                value.c.AttrID == facade_attributes.c.AttributeIndex,
            ),
        )
        stmt = (
            select(
                facade_attributes.c.Category.label("category"),
                facade_attributes.c.Attribute.label("attribute"),
                value.c.AttrType.label("attribute_type"),
                value.c.ValDate.label("val_date"),
                value.c.ValInt.label("val_int"),
                value.c.ValLong.label("val_long"),
                value.c.ValReal.label("val_real"),
                value.c.ValStr.label("val_string"),
            )
            .select_from(joined)
            .where(node.c.DataID == node_id)
            .order_by(
                facade_attributes.c.Category,
                facade_attributes.c.AttributeIndex,
                value.c.EntryNum,
            )
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_single_slot(dict(row)) for row in rows]

    def execute_ids(self, statement: Select[Any]) -> list[int]:
        """Run a compiled query and return the matching node ids."""
        with self._engine.connect() as conn:
            rows = conn.execute(statement).mappings().all()
        return [int(row[RESULT_COLUMN]) for row in rows]
