"""Tests for compiling clause trees into SQL."""

from __future__ import annotations

import pytest
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.dialects import sqlite

from nodefacade.domain.query import parse_query
from nodefacade.infrastructure.database.compiler import (
    CORE_COLUMNS,
    QueryCompiler,
    UnsupportedColumnError,
    predicate_tag,
)


def _compile(text: str, *, strict: bool = False):  # type: ignore[no-untyped-def]
    return QueryCompiler(strict_columns=strict).compile(parse_query(text))


def _bind_types(compiled) -> dict[str, object]:  # type: ignore[no-untyped-def]
    binds = compiled.statement.compile(dialect=sqlite.dialect()).binds
    return {name: binds[name].type for name in compiled.parameters}


class TestCorePredicates:
    def test_name_compiles_against_core_table(self) -> None:
        compiled = _compile("node.name == 'Invoice'")
        sql = compiled.sql(sqlite.dialect())
        assert '"DTreeCore"."Name" = ?' in sql
        assert '"DTreeCore"."Deleted" = ?' in sql
        assert list(compiled.parameters.values()) == ["Invoice"]
        assert all(isinstance(t, String) for t in _bind_types(compiled).values())

    def test_field_lookup_is_case_insensitive(self) -> None:
        for text in ("node.DataId == 3001", "node.dataid == 3001", "node.ID == 3001"):
            assert '"DTreeCore"."DataID" = ' in _compile(text).sql()

    def test_allow_list(self) -> None:
        assert CORE_COLUMNS["parentid"] == "ParentID"
        assert CORE_COLUMNS["versionnum"] == "VersionNum"
        assert set(CORE_COLUMNS.values()) <= {
            "DataID", "ParentID", "Name", "OwnerID", "CreateDate", "ModifyDate",
            "SubType", "VersionNum",
        }

    def test_boolean_binds_as_integer(self) -> None:
        compiled = _compile("node.subType == true")
        assert list(compiled.parameters.values()) == [1]
        assert all(isinstance(t, Integer) for t in _bind_types(compiled).values())

    def test_date_binds_as_datetime(self) -> None:
        compiled = _compile("node.createDate >= '01/01/2024'")
        assert all(isinstance(t, DateTime) for t in _bind_types(compiled).values())


class TestAttributePredicates:
    def test_compiles_against_category_view(self) -> None:
        compiled = _compile("Finance.Status == 'Approved'")
        sql = compiled.sql()
        assert '"Facade_Attributes"' in sql
        assert '"LLAttrData"' in sql
        assert "b.\"ValStr\"" in sql
        assert "a.\"VersionNum\" = b.\"VerNum\"" in sql
        assert "b.\"DefVerN\" = sq.\"CategoryVersion\"" in sql

    def test_names_are_bound_not_interpolated(self) -> None:
        compiled = _compile("Finance.Status == 'Approved'")
        sql = compiled.sql()
        assert "Finance" not in sql
        assert "Status" not in sql.replace('"Facade_Attributes"', "")
        params = compiled.statement.compile().params
        assert "Finance" in params.values()
        assert "Status" in params.values()

    @pytest.mark.parametrize(
        ("text", "column"),
        [
            ("Finance.Amount > 100", "ValInt"),
            ("Finance.Paid == false", "ValInt"),
            ("Finance.Due Date < '31/03/2024'", "ValDate"),
            ("Finance.Status != 'x'", "ValStr"),
        ],
    )
    def test_value_column_follows_value_type(self, text: str, column: str) -> None:
        assert f'b."{column}"' in _compile(text).sql()


class TestCompounds:
    def test_and_is_intersect(self) -> None:
        sql = _compile("node.subType == 144 && Finance.Amount > 100").sql()
        assert "INTERSECT" in sql
        assert "UNION" not in sql

    def test_or_is_union(self) -> None:
        sql = _compile("node.subType == 144 || node.subType == 0").sql()
        assert "UNION" in sql

    def test_nested_compounds(self) -> None:
        sql = _compile("(node.id == 1 || node.id == 2) && node.id == 3").sql()
        assert "UNION" in sql
        assert "INTERSECT" in sql

    def test_identical_predicates_share_a_parameter(self) -> None:
        compiled = _compile("node.id == 1 || node.id == 1")
        assert len(compiled.parameters) == 1

    def test_parameter_keys_are_predicate_tags(self) -> None:
        clause = parse_query("node.id == 1 && node.name == 'a'")
        compiled = QueryCompiler().compile(clause)
        assert set(compiled.parameters) == {
            predicate_tag(clause.left),  # type: ignore[union-attr]
            predicate_tag(clause.right),  # type: ignore[union-attr]
        }
        assert all(tag.startswith("p_") and len(tag) == 14 for tag in compiled.parameters)

    def test_tags_distinguish_value_types(self) -> None:
        assert predicate_tag(parse_query("node.id == 1")) != predicate_tag(  # type: ignore[arg-type]
            parse_query("node.id == '1'")  # type: ignore[arg-type]
        )


class TestUnsupportedColumns:
    def test_dropped_operand_leaves_sibling(self) -> None:
        compiled = _compile("node.bogus == 1 && node.name == 'Invoice'")
        sql = compiled.sql()
        assert "INTERSECT" not in sql
        assert '"DTreeCore"."Name"' in sql
        assert len(compiled.warnings) == 1
        assert "bogus" in compiled.warnings[0]

    def test_all_dropped_matches_nothing(self) -> None:
        compiled = _compile("node.bogus == 1 || node.other == 2")
        assert compiled.matches_nothing
        assert compiled.statement is None
        assert compiled.sql() == ""
        assert len(compiled.warnings) == 2

    def test_strict_mode_raises(self) -> None:
        with pytest.raises(UnsupportedColumnError) as excinfo:
            _compile("node.bogus == 1", strict=True)
        assert excinfo.value.field_name == "bogus"
