"""
Tests for the SQLAlchemy where compiler.
"""

from datetime import datetime, timezone

import pytest

from datasearch.constants import SearchOperator
from datasearch.exceptions import InvalidFieldError, UnsupportedOperatorError
from datasearch.querydsl.compilers.relational import SQLAlchemyWhereCompiler, relationship_path
from datasearch.schema import SearchCriteria


def _criteria(key, op, value=None, **kwargs):
    return SearchCriteria(key=key, op=op, value=value, **kwargs)


def _render(clause):
    compiled = clause.compile()
    return str(compiled), compiled.params


class TestComparisons:
    def test_eq_uses_inferred_value(self, sql_compiler):
        sql, params = _render(sql_compiler.compile(_criteria("total", "EQ", "42")))
        assert sql == "orders.total = :total_1"
        assert params == {"total_1": 42}

    def test_ne(self, sql_compiler):
        sql, params = _render(sql_compiler.compile(_criteria("status", "NE", "PAID")))
        assert sql == "orders.status != :status_1"
        assert params == {"status_1": "PAID"}

    def test_eq_passes_list_through(self, sql_compiler):
        sql, params = _render(sql_compiler.compile(_criteria("status", "EQ", "NEW,PAID")))
        assert sql == "orders.status = :status_1"
        assert params == {"status_1": ["NEW", "PAID"]}

    def test_ne_passes_list_through(self, sql_compiler):
        sql, params = _render(sql_compiler.compile(_criteria("total", "NE", "1,2")))
        assert sql == "orders.total != :total_1"
        assert params == {"total_1": [1, 2]}

    def test_eq_timestamp(self, sql_compiler):
        _, params = _render(sql_compiler.compile(_criteria("created_at", "EQ", "2023-05-01T10:00:00.000Z")))
        assert params == {"created_at_1": datetime(2023, 5, 1, 10, 0, tzinfo=timezone.utc)}

    def test_eq_null_renders_is_null(self, sql_compiler):
        sql, _ = _render(sql_compiler.compile(_criteria("note", "EQ", "null")))
        assert sql == "orders.note IS NULL"

    @pytest.mark.parametrize(
        "op,sql_op",
        [("GT", ">"), ("GE", ">="), ("LT", "<"), ("LE", "<=")],
    )
    def test_ordering_compares_text_form(self, sql_compiler, op, sql_op):
        sql, params = _render(sql_compiler.compile(_criteria("total", op, "10")))
        assert sql == f"orders.total {sql_op} :total_1"
        assert params == {"total_1": "10"}

    def test_ordering_on_timestamp_keeps_search_format(self, sql_compiler):
        _, params = _render(sql_compiler.compile(_criteria("created_at", "GT", "2023-05-01T10:00:00.000Z")))
        assert params == {"created_at_1": "2023-05-01T10:00:00.000Z"}

    def test_ordering_on_number_is_normalised_text(self, sql_compiler):
        _, params = _render(sql_compiler.compile(_criteria("total", "GE", "10.50")))
        assert params == {"total_1": "10.5"}


class TestExists:
    def test_exists_true_is_not_null(self, sql_compiler):
        sql, _ = _render(sql_compiler.compile(_criteria("note", "EXISTS", exists=True)))
        assert sql == "orders.note IS NOT NULL"

    def test_exists_false_is_null(self, sql_compiler):
        sql, _ = _render(sql_compiler.compile(_criteria("note", "EXISTS", exists=False)))
        assert sql == "orders.note IS NULL"


class TestNavigation:
    def test_scalar_relationship_uses_has(self, sql_compiler):
        sql, params = _render(sql_compiler.compile(_criteria("customer.name", "EQ", "Ann")))
        assert sql.startswith("EXISTS (SELECT 1")
        assert "customers.name = :name_1" in sql
        assert params == {"name_1": "Ann"}

    def test_nested_relationships(self, sql_compiler):
        sql, params = _render(sql_compiler.compile(_criteria("customer.address.city", "EQ", "Paris")))
        assert sql.count("EXISTS") == 2
        assert "addresses.city = :city_1" in sql
        assert params == {"city_1": "Paris"}

    def test_collection_relationship_uses_any(self, sql_compiler):
        sql, _ = _render(sql_compiler.compile(_criteria("lines.sku", "NE", "X-1")))
        assert sql.startswith("EXISTS (SELECT 1")
        assert "order_lines.sku != :sku_1" in sql

    def test_path_factory_receives_prefix(self, sql_compiler, models):
        seen = []

        def factory(prefix):
            seen.append(tuple(prefix))
            return models.Address

        sql, _ = _render(sql_compiler.compile(_criteria("customer.address.city", "EQ", "Paris"), path_factory=factory))
        assert seen == [("customer", "address")]
        assert sql == "addresses.city = :city_1"

    def test_relationship_path_factory(self, sql_compiler, models):
        clause = sql_compiler.compile(
            _criteria("customer.address.city", "LT", "M"),
            path_factory=relationship_path(models.Order),
        )
        sql, params = _render(clause)
        assert sql == "addresses.city < :city_1"
        assert params == {"city_1": "M"}

    def test_single_segment_with_factory_gets_empty_prefix(self, sql_compiler, models):
        seen = []
        sql_compiler.compile(
            _criteria("status", "EQ", "NEW"),
            path_factory=lambda prefix: seen.append(tuple(prefix)) or models.Order,
        )
        assert seen == [()]


class TestErrors:
    def test_unknown_operator_yields_nothing(self, sql_compiler):
        assert sql_compiler.compile(_criteria("status", "UNKNOWN", "x")) is None

    def test_unknown_operator_on_blank_path(self, sql_compiler):
        assert sql_compiler.compile(_criteria("", SearchOperator.UNKNOWN)) is None

    def test_blank_path_with_field_operator(self, sql_compiler):
        with pytest.raises(InvalidFieldError):
            sql_compiler.compile(_criteria("  ", "EQ", "x"))

    def test_missing_attribute(self, sql_compiler):
        with pytest.raises(InvalidFieldError) as exc:
            sql_compiler.compile(_criteria("colour", "EQ", "red"))
        assert exc.value.details["field"] == "colour"

    def test_missing_relationship(self, sql_compiler):
        with pytest.raises(InvalidFieldError):
            sql_compiler.compile(_criteria("status.code", "EQ", "x"))

    def test_operator_outside_closed_set(self, sql_compiler):
        criteria = SearchCriteria.model_construct(key="status", op="LIKE", value="x", array=False, exists=False, type=None)
        with pytest.raises(UnsupportedOperatorError):
            sql_compiler.compile(criteria)


class TestToWhere:
    def test_conjunction_skips_unknown(self, sql_compiler):
        clause = sql_compiler.to_where(
            [
                _criteria("status", "EQ", "PAID"),
                _criteria("status", "UNKNOWN", "?"),
                _criteria("total", "GT", "100"),
            ]
        )
        sql, params = _render(clause)
        assert sql == "orders.status = :status_1 AND orders.total > :total_1"
        assert params == {"status_1": "PAID", "total_1": "100"}

    def test_single_predicate_is_not_wrapped(self, sql_compiler):
        sql, _ = _render(sql_compiler.to_where([_criteria("note", "EXISTS", exists=True)]))
        assert sql == "orders.note IS NOT NULL"

    def test_nothing_to_compile(self, sql_compiler):
        assert sql_compiler.to_where([]) is None
        assert sql_compiler.to_where([_criteria("x", "UNKNOWN")]) is None

    def test_to_expr(self, sql_compiler):
        clause = sql_compiler.compile(_criteria("status", "EQ", "PAID"))
        assert sql_compiler.to_expr(clause) == "orders.status = :status_1"


def test_default_inferencer_follows_settings(models):
    compiler = SQLAlchemyWhereCompiler(models.Order)
    assert compiler.inferencer.decimal_separator == "."
