"""
Unit tests for the SELECT query builder and SQL dialects.
"""

import pytest

from selection import DefaultFilter, Operator, SelectQuery, detect_dialect, get_dialect
from selection.dialects import MYSQL, POSTGRESQL, SQLITE, SQLSERVER, SQLSERVER_PYFORMAT


class TestDialects:
    """Test dialect lookup, detection and rendering"""

    def test_get_dialect_case_insensitive(self):
        assert get_dialect("PostgreSQL") is POSTGRESQL

    def test_get_unknown_dialect(self):
        with pytest.raises(ValueError, match="Unsupported dialect"):
            get_dialect("oracle")

    @pytest.mark.parametrize(
        "module,expected",
        [
            ("psycopg", POSTGRESQL),
            ("psycopg2.extensions", POSTGRESQL),
            ("pyodbc", SQLSERVER),
            ("pymssql", SQLSERVER_PYFORMAT),
            ("pymssql._pymssql", SQLSERVER_PYFORMAT),
            ("sqlite3", SQLITE),
            ("pymysql.connections", MYSQL),
        ],
    )
    def test_detect_dialect_from_connection(self, module, expected):
        """Test dialect detection from the driver module of the connection"""
        connection = type("Connection", (), {"__module__": module})()

        assert detect_dialect(connection) is expected

    def test_detect_unknown_driver(self):
        """Test unknown drivers require an explicit dialect"""
        connection = type("Connection", (), {"__module__": "oracledb"})()

        with pytest.raises(ValueError, match="Cannot detect SQL dialect"):
            detect_dialect(connection)

    @pytest.mark.parametrize(
        "dialect,expected",
        [
            (POSTGRESQL, '"public"."customers"'),
            (SQLITE, '"public"."customers"'),
            (MYSQL, "`public`.`customers`"),
            (SQLSERVER, "[public].[customers]"),
        ],
    )
    def test_quote_table(self, dialect, expected):
        assert dialect.quote_table("public.customers") == expected

    @pytest.mark.parametrize(
        "dialect,expected",
        [
            (POSTGRESQL, "%(param_0)s"),
            (MYSQL, "%(param_0)s"),
            (SQLITE, ":param_0"),
            (SQLSERVER, "?"),
            (SQLSERVER_PYFORMAT, "%(param_0)s"),
        ],
    )
    def test_placeholder(self, dialect, expected):
        assert dialect.placeholder("param_0") == expected


class TestSelectQuery:
    """Test SELECT rendering and parameter binding"""

    def test_base_query(self):
        """Test an unfiltered select-all query"""
        query = SelectQuery(SQLITE, "customers")

        assert query.get_sql() == 'SELECT * FROM "customers" t'
        assert query.get_parameters() == {}

    def test_table_name_with_space_is_quoted(self):
        """Test table names outside plain ASCII words are quoted, not rejected"""
        query = SelectQuery(SQLITE, "order items")

        assert query.get_sql() == 'SELECT * FROM "order items" t'

    def test_hostile_table_name_is_escaped(self):
        """Test a closing quote inside a table name is doubled"""
        query = SelectQuery(SQLSERVER, "dbo.orders]; DROP TABLE users--")

        assert query.get_sql() == "SELECT * FROM [dbo].[orders]]; DROP TABLE users--] t"

    def test_rejects_empty_table_name(self):
        query = SelectQuery(SQLITE, "")

        with pytest.raises(ValueError, match="cannot be empty"):
            query.get_sql()

    def test_equality_filter(self):
        """Test a scalar filter binds exactly one parameter"""
        query = SelectQuery(SQLITE, "customers")

        predicate = query.add_filter(DefaultFilter("country", Operator.EQ, "DE"), 0)

        assert predicate == '"country" = :param_0'
        assert query.parameters == {"param_0": "DE"}
        assert query.get_sql() == 'SELECT * FROM "customers" t WHERE ("country" = :param_0)'

    @pytest.mark.parametrize(
        "operator,sql",
        [
            (Operator.NEQ, "<>"),
            (Operator.LT, "<"),
            (Operator.LTE, "<="),
            (Operator.GT, ">"),
            (Operator.GTE, ">="),
            (Operator.LIKE, "LIKE"),
            (Operator.NOT_LIKE, "NOT LIKE"),
        ],
    )
    def test_comparison_operators(self, operator, sql):
        query = SelectQuery(POSTGRESQL, "orders")

        predicate = query.add_filter(DefaultFilter("total", operator, 10), 2)

        assert predicate == f'"total" {sql} %(param_2)s'
        assert query.parameters == {"param_2": 10}

    def test_in_filter_binds_one_parameter_per_value(self):
        """Test each in value gets its own uniquely named parameter"""
        query = SelectQuery(SQLITE, "customers")

        predicate = query.add_filter(DefaultFilter("id", Operator.IN, [1, 2, 3]), 0)

        assert query.parameters == {"param_0_0": 1, "param_0_1": 2, "param_0_2": 3}
        assert predicate == '"id" IN (:param_0_0, :param_0_1, :param_0_2)'

    def test_not_in_filter(self):
        query = SelectQuery(SQLITE, "customers")

        predicate = query.add_filter(DefaultFilter("id", Operator.NOT_IN, [7]), 1)

        assert predicate == '"id" NOT IN (:param_1_0)'
        assert query.parameters == {"param_1_0": 7}

    def test_in_filter_with_scalar_value(self):
        """Test a scalar in value is treated as a single element list"""
        query = SelectQuery(SQLITE, "customers")

        query.add_filter(DefaultFilter("country", Operator.IN, "DE"), 0)

        assert query.parameters == {"param_0_0": "DE"}

    def test_empty_in_filter_matches_nothing(self):
        """Test an empty in list renders as a false predicate"""
        query = SelectQuery(SQLITE, "customers")

        predicate = query.add_filter(DefaultFilter("id", Operator.IN, []), 0)

        assert predicate == "1 = 0"
        assert query.parameters == {}

    def test_empty_not_in_filter_matches_everything(self):
        query = SelectQuery(SQLITE, "customers")

        predicate = query.add_filter(DefaultFilter("id", Operator.NOT_IN, []), 0)

        assert predicate == "1 = 1"

    def test_null_operators_bind_nothing(self):
        query = SelectQuery(SQLITE, "customers")

        query.add_filter(DefaultFilter("email", Operator.IS_NULL), 0)
        query.add_filter(DefaultFilter("country", Operator.IS_NOT_NULL), 1)

        assert query.parameters == {}
        assert query.predicates == ['"email" IS NULL', '"country" IS NOT NULL']

    def test_duplicate_parameter_name_rejected(self):
        query = SelectQuery(SQLITE, "customers")
        query.set_parameter("param_0", 1)

        with pytest.raises(ValueError, match="already bound"):
            query.set_parameter("param_0", 2)

    def test_hostile_column_name_is_escaped(self):
        """Test a column name cannot break out of its quotes"""
        query = SelectQuery(SQLITE, "customers")

        predicate = query.add_filter(DefaultFilter('id" = 1 OR "1', Operator.EQ, 1), 0)

        assert predicate == '"id"" = 1 OR ""1" = :param_0'
        assert query.parameters == {"param_0": 1}

    def test_rejects_column_name_with_nul(self):
        query = SelectQuery(SQLITE, "customers")

        with pytest.raises(ValueError, match="NUL characters are not allowed"):
            query.add_filter(DefaultFilter("id\x00", Operator.EQ, 1), 0)

    def test_limit_and_order_by(self):
        query = SelectQuery(POSTGRESQL, "orders")
        query.add_filter(DefaultFilter("total", Operator.GT, 5), 0)
        query.set_max_results(10).order_by("id DESC")

        assert query.get_sql() == (
            'SELECT * FROM "orders" t WHERE ("total" > %(param_0)s) '
            "ORDER BY id DESC LIMIT 10"
        )

    def test_sqlserver_uses_top_and_positional_parameters(self):
        """Test SQL Server renders TOP and a positional parameter tuple"""
        query = SelectQuery(SQLSERVER, "dbo.orders")
        query.add_filter(DefaultFilter("customer_id", Operator.IN, [1, 2]), 0)
        query.add_filter(DefaultFilter("total", Operator.GT, 5), 1)
        query.set_max_results(3).order_by("id")

        assert query.get_sql() == (
            "SELECT TOP 3 * FROM [dbo].[orders] t "
            "WHERE ([customer_id] IN (?, ?)) AND ([total] > ?) ORDER BY id"
        )
        assert query.get_parameters() == (1, 2, 5)

    def test_pymssql_uses_top_and_named_parameters(self):
        """Test the pymssql dialect renders TOP with pyformat placeholders"""
        query = SelectQuery(SQLSERVER_PYFORMAT, "dbo.orders")
        query.add_filter(DefaultFilter("customer_id", Operator.IN, [1, 2]), 0)
        query.set_max_results(3)

        assert query.get_sql() == (
            "SELECT TOP 3 * FROM [dbo].[orders] t "
            "WHERE ([customer_id] IN (%(param_0_0)s, %(param_0_1)s))"
        )
        assert query.get_parameters() == {"param_0_0": 1, "param_0_1": 2}

    @pytest.mark.parametrize("limit", [-1, 2.5, "10", True])
    def test_invalid_limit(self, limit):
        query = SelectQuery(SQLITE, "customers")

        with pytest.raises(ValueError, match="Invalid limit"):
            query.set_max_results(limit)

    def test_zero_limit_allowed(self):
        query = SelectQuery(SQLITE, "customers").set_max_results(0)
        assert query.get_sql().endswith("LIMIT 0")
