"""Tests for NodeStore against the seeded fixture store."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy.engine import Engine

from nodefacade.domain.query import parse_query
from nodefacade.infrastructure.database.compiler import QueryCompiler
from nodefacade.infrastructure.repositories.nodes import NodeStore


@pytest.fixture
def store(db_engine: Engine) -> NodeStore:
    return NodeStore(db_engine)


class TestFindChild:
    def test_finds_named_child(self, store: NodeStore) -> None:
        row = store.find_child(2000, "Finance")
        assert row is not None
        assert row["data_id"] == 3000
        assert row["parent_id"] == 2000
        assert row["create_date"] == datetime(2024, 1, 15, 9, 30)

    def test_top_level(self, store: NodeStore) -> None:
        row = store.find_child(-1, "Enterprise")
        assert row is not None
        assert row["data_id"] == 2000

    def test_only_positive_ids(self, store: NodeStore) -> None:
        row = store.find_child(2000, "Apollo")
        assert row is not None
        assert row["data_id"] == 4000

    def test_deleted_rows_are_invisible(self, store: NodeStore) -> None:
        assert store.find_child(3000, "Archive") is None

    def test_missing(self, store: NodeStore) -> None:
        assert store.find_child(2000, "Nowhere") is None


class TestGetCore:
    def test_alias_keeps_origin(self, store: NodeStore) -> None:
        row = store.get_core(3100)
        assert row is not None
        assert row["sub_type"] == 1
        assert row["origin_data_id"] == 3000

    def test_negative_twin_is_addressable_by_id(self, store: NodeStore) -> None:
        row = store.get_core(-4000)
        assert row is not None
        assert row["name"] == "Apollo"

    def test_deleted(self, store: NodeStore) -> None:
        assert store.get_core(3003) is None


class TestChildIds:
    def test_ordered_by_name_without_deleted(self, store: NodeStore) -> None:
        assert store.child_ids(3000) == [3001, 3002]

    def test_enterprise_children(self, store: NodeStore) -> None:
        assert store.child_ids(2000) == [4000, 3000, 3100]

    def test_volume_children_live_under_negative_id(self, store: NodeStore) -> None:
        assert store.child_ids(4000) == []
        assert store.child_ids(-4000) == [4001]


class TestVersions:
    def test_ordered_by_version(self, store: NodeStore) -> None:
        versions = store.get_versions(3001)
        assert [v["version_number"] for v in versions] == [1, 2]
        assert versions[1]["filename"] == "invoice-v2.pdf"
        assert versions[1]["size_bytes"] == 2048

    def test_none(self, store: NodeStore) -> None:
        assert store.get_versions(3000) == []


class TestAttributes:
    def test_only_current_versions(self, store: NodeStore) -> None:
        rows = store.get_attributes(3001)
        assert [(r["attribute"], r["val_string"], r["val_int"]) for r in rows] == [
            ("Status", "Approved", None),
            ("Amount", None, 150),
            ("Due Date", None, None),
        ]
        assert rows[2]["val_date"] == datetime(2024, 3, 31)
        assert {r["category"] for r in rows} == {"Finance"}

    def test_multi_slot_row_keeps_integer(self, store: NodeStore) -> None:
        (row,) = store.get_attributes(4002)
        assert row["val_int"] == 75
        assert row["val_string"] is None


class TestMisc:
    def test_schema_version(self, store: NodeStore) -> None:
        assert store.schema_version() == "16.2.0"

    def test_execute_ids(self, store: NodeStore) -> None:
        compiled = QueryCompiler().compile(parse_query("Finance.Amount > 10"))
        assert compiled.statement is not None
        assert store.execute_ids(compiled.statement) == [3001, 4001, 4002]
