"""
Prometheus metrics for data selection.
"""

from prometheus_client import Counter, Histogram

SELECT_QUERIES = Counter(
    "select_queries_total",
    "Select queries executed",
    ["table", "mode"],
)

QUERY_BUILD_TIME = Histogram(
    "select_query_build_seconds",
    "Time to build a select query",
    ["table"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

BOUND_PARAMETERS = Histogram(
    "select_query_bound_parameters",
    "Number of parameters bound per select query",
    ["table"],
    buckets=[0, 1, 5, 10, 50, 100, 500, 1000, 5000],
)

DEPENDENCY_ERRORS = Counter(
    "select_dependency_errors_total",
    "Data dependent filters that could not be resolved",
    ["table", "referenced_table"],
)
