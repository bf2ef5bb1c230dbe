"""
Helpers for harvesting column values from extracted rows.

The orchestrator owns the collected-values map; these helpers only compute
what to add to it, they never mutate it.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from utils.tracing import trace_function


@trace_function("collect_column_values", component="selection")
def collect_column_values(
    rows: Iterable[Mapping[str, Any]],
    columns: Iterable[str],
) -> dict[str, list[Any]]:
    """
    Gather the distinct values of some columns across rows.

    Args:
        rows: Extracted rows (before conversion)
        columns: Columns later tables depend on

    Returns:
        column -> distinct values in first-seen order; NULLs are skipped
        since they never match an IN predicate
    """
    columns = list(columns)
    collected: dict[str, list[Any]] = {column: [] for column in columns}
    seen: dict[str, set[Any]] = {column: set() for column in columns}

    for row in rows:
        for column in columns:
            value = row.get(column)
            if value is None:
                continue
            try:
                if value in seen[column]:
                    continue
                seen[column].add(value)
            except TypeError:
                # Arrays and JSON documents are unhashable
                if value in collected[column]:
                    continue
            collected[column].append(value)

    return collected
