"""Tests for the attribute query grammar."""

from __future__ import annotations

from datetime import datetime

import pytest

from nodefacade.domain.query import (
    AndClause,
    AttributePath,
    BooleanValue,
    Comparator,
    DateValue,
    IntegerValue,
    OrClause,
    Predicate,
    QueryParseError,
    StringValue,
    parse_query,
)


def _pred(path: str, comparator: str, value: object) -> Predicate:
    return Predicate(AttributePath(tuple(path.split("."))), Comparator(comparator), value)  # type: ignore[arg-type]


class TestPredicates:
    def test_core_string_predicate(self) -> None:
        clause = parse_query("node.name == 'Invoice'")
        assert clause == _pred("node.name", "==", StringValue("Invoice"))
        assert isinstance(clause, Predicate)
        assert clause.path.is_core

    def test_category_predicate(self) -> None:
        clause = parse_query("Finance.Status == 'Approved'")
        assert isinstance(clause, Predicate)
        assert clause.path.namespace == "Finance"
        assert clause.path.field == "Status"
        assert not clause.path.is_core

    def test_identifiers_may_contain_spaces(self) -> None:
        clause = parse_query("Project Data.Due Date > '01/02/2024'")
        assert isinstance(clause, Predicate)
        assert clause.path.components == ("Project Data", "Due Date")

    @pytest.mark.parametrize("op", ["==", "!=", "<", "<=", ">", ">="])
    def test_every_comparator(self, op: str) -> None:
        clause = parse_query(f"node.id {op} 42")
        assert isinstance(clause, Predicate)
        assert clause.comparator == Comparator(op)

    def test_no_whitespace_needed(self) -> None:
        assert parse_query("node.id>=42") == _pred("node.id", ">=", IntegerValue(42))


class TestValues:
    def test_negative_integer(self) -> None:
        clause = parse_query("node.parentId == -4000")
        assert isinstance(clause, Predicate)
        assert clause.value == IntegerValue(-4000)

    def test_booleans(self) -> None:
        yes = parse_query("Finance.Paid == true")
        no = parse_query("Finance.Paid == false")
        assert isinstance(yes, Predicate) and yes.value == BooleanValue(True)
        assert isinstance(no, Predicate) and no.value == BooleanValue(False)

    def test_date_literal(self) -> None:
        clause = parse_query("node.createDate > '15/01/2024'")
        assert isinstance(clause, Predicate)
        assert clause.value == DateValue(datetime(2024, 1, 15))

    def test_non_date_string_stays_string(self) -> None:
        clause = parse_query("node.name == '2024-01-15'")
        assert isinstance(clause, Predicate)
        assert clause.value == StringValue("2024-01-15")

    def test_escaped_quote(self) -> None:
        clause = parse_query(r"node.name == 'O\'Brien'")
        assert isinstance(clause, Predicate)
        assert clause.value == StringValue("O'Brien")


class TestCompounds:
    def test_and(self) -> None:
        clause = parse_query("node.id == 1 && node.name == 'a'")
        assert clause == AndClause(
            _pred("node.id", "==", IntegerValue(1)),
            _pred("node.name", "==", StringValue("a")),
        )

    def test_chain_is_left_nested(self) -> None:
        clause = parse_query("node.id == 1 || node.id == 2 || node.id == 3")
        assert isinstance(clause, OrClause)
        assert isinstance(clause.left, OrClause)
        assert clause.right == _pred("node.id", "==", IntegerValue(3))

    def test_and_or_share_precedence_left_to_right(self) -> None:
        # "a || b && c" groups as "(a || b) && c", not "a || (b && c)".
        clause = parse_query("node.id == 1 || node.id == 2 && node.id == 3")
        assert clause == AndClause(
            OrClause(
                _pred("node.id", "==", IntegerValue(1)),
                _pred("node.id", "==", IntegerValue(2)),
            ),
            _pred("node.id", "==", IntegerValue(3)),
        )

    def test_parentheses_override_grouping(self) -> None:
        clause = parse_query("node.id == 1 || (node.id == 2 && node.id == 3)")
        assert isinstance(clause, OrClause)
        assert isinstance(clause.right, AndClause)

    def test_parenthesized_single_predicate(self) -> None:
        assert parse_query("(node.id == 1)") == _pred("node.id", "==", IntegerValue(1))


class TestErrors:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "node.name ==",
            "node == 1",
            "node.name = 'a'",
            "node.name == 'a' &&",
            "node.name == 'unterminated",
            "(node.id == 1",
            "node.id == 1 node.id == 2",
        ],
    )
    def test_malformed_text_raises(self, text: str) -> None:
        with pytest.raises(QueryParseError):
            parse_query(text)

    def test_error_carries_position(self) -> None:
        with pytest.raises(QueryParseError) as excinfo:
            parse_query("node.id == 1 &&\n node.name")
        assert excinfo.value.line >= 1
        assert excinfo.value.column >= 1
        assert isinstance(excinfo.value, ValueError)

    @pytest.mark.parametrize(
        "literal", ["99999999999999999999", "9223372036854775808", "-9223372036854775809"]
    )
    def test_integer_outside_64_bit_range(self, literal: str) -> None:
        with pytest.raises(QueryParseError, match="out of range"):
            parse_query(f"node.id == {literal}")

    def test_64_bit_bounds_are_accepted(self) -> None:
        high = parse_query("node.id == 9223372036854775807")
        low = parse_query("node.id == -9223372036854775808")
        assert high.value == IntegerValue(2**63 - 1)  # type: ignore[union-attr]
        assert low.value == IntegerValue(-(2**63))  # type: ignore[union-attr]
