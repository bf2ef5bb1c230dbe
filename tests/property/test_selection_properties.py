"""
Property-based tests for query building and dependency resolution.

Tests properties related to:
- Parameter naming and uniqueness
- Placeholder / parameter agreement per dialect
- Resolution of data dependent filters
- Collection of dependency values
"""

import re
from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st

from selection import DataDependentFilter, DefaultFilter, Operator, SelectQuery, collect_column_values
from selection.dialects import DIALECTS, SQLITE

identifier = st.from_regex(r"[a-z_][a-z0-9_]{0,10}", fullmatch=True)

scalar_value = st.one_of(
    st.none(),
    st.integers(min_value=-(2**31), max_value=2**31 - 1),
    st.text(max_size=20),
    st.booleans(),
)


# Property: an in filter binds exactly one uniquely named parameter per value
@given(column=identifier, index=st.integers(min_value=0, max_value=50),
       values=st.lists(scalar_value, min_size=1, max_size=30))
def test_in_filter_parameter_names(column: str, index: int, values: list[Any]):
    """Each value of an in list gets param_<index>_<position>."""
    query = SelectQuery(SQLITE, "customers")

    query.add_filter(DefaultFilter(column, Operator.IN, values), index)

    assert list(query.parameters) == [f"param_{index}_{j}" for j in range(len(values))]
    assert list(query.parameters.values()) == values


# Property: parameter names never collide across the filters of one query
@given(sizes=st.lists(st.integers(min_value=0, max_value=5), min_size=1, max_size=10))
def test_parameter_names_unique_across_filters(sizes: list[int]):
    """Filters at different positions never bind the same name."""
    query = SelectQuery(SQLITE, "orders")

    for index, size in enumerate(sizes):
        if size == 0:
            query.add_filter(DefaultFilter("status", Operator.EQ, "new"), index)
        else:
            query.add_filter(DefaultFilter("id", Operator.IN, list(range(size))), index)

    expected = sum(size or 1 for size in sizes)
    assert len(query.parameters) == expected
    assert len(query.predicates) == len(sizes)


# Property: every placeholder in the rendered SQL has a bound parameter
@given(dialect_name=st.sampled_from(sorted(DIALECTS)),
       values=st.lists(st.integers(), min_size=1, max_size=10),
       threshold=st.integers())
@settings(max_examples=50)
def test_placeholders_match_parameters(dialect_name: str, values: list[int], threshold: int):
    """Rendered placeholders and driver parameters agree in count."""
    dialect = DIALECTS[dialect_name]
    query = SelectQuery(dialect, "orders")
    query.add_filter(DefaultFilter("customer_id", Operator.IN, values), 0)
    query.add_filter(DefaultFilter("total", Operator.GT, threshold), 1)

    sql = query.get_sql()
    parameters = query.get_parameters()

    placeholder_pattern = {
        "named": r":param_\d+(?:_\d+)?",
        "pyformat": r"%\(param_\d+(?:_\d+)?\)s",
        "qmark": r"\?",
    }[dialect.paramstyle]
    assert len(re.findall(placeholder_pattern, sql)) == len(parameters)
    if dialect.paramstyle == "qmark":
        assert parameters == (*values, threshold)


# Property: values never appear in the rendered SQL
@given(value=st.text(min_size=1, max_size=30).filter(lambda v: v.strip() and "param" not in v))
def test_values_are_never_inlined(value: str):
    query = SelectQuery(SQLITE, "customers")
    query.add_filter(DefaultFilter("name", Operator.EQ, value), 0)

    sql = query.get_sql()

    assert sql == 'SELECT * FROM "customers" t WHERE ("name" = :param_0)'
    assert query.parameters == {"param_0": value}


# Property: resolving a dependent filter yields an in filter over the collected values
@given(values=st.lists(st.integers(), max_size=20))
def test_resolve_uses_collected_values(values: list[int]):
    dependent = DataDependentFilter(
        "customer_id", referenced_table="customers", referenced_column="id"
    )

    resolved = dependent.resolve({"customers": {"id": values}}, "orders")

    assert resolved.operator is Operator.IN
    assert resolved.column_name == "customer_id"
    assert resolved.value == tuple(values)
    # Property: the configured filter is never mutated
    assert dependent.value == ()


# Property: collected values are distinct, non-null and in first-seen order
@given(column_values=st.lists(st.one_of(st.none(), st.integers(min_value=0, max_value=20)), max_size=50))
def test_collect_column_values(column_values: list[int | None]):
    rows = [{"id": value, "name": "x"} for value in column_values]

    collected = collect_column_values(rows, ["id"])

    expected = list(dict.fromkeys(v for v in column_values if v is not None))
    assert collected == {"id": expected}
