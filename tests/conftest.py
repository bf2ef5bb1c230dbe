"""
Pytest configuration and fixtures for snakedump tests.
Provides shared fixtures for database connections and dump policies.
"""

import sqlite3
from unittest.mock import MagicMock

import pytest

from configuration import parse_dump_config


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "property: mark test as property-based test")


@pytest.fixture
def mock_connection() -> MagicMock:
    """DB-API connection double whose cursor records executed statements."""
    connection = MagicMock()
    connection.cursor.return_value = MagicMock(name="cursor")
    return connection


@pytest.fixture
def shop_connection():
    """In-memory sqlite shop database with customers, orders and order items."""
    connection = sqlite3.connect(":memory:")
    connection.executescript(
        """
        CREATE TABLE customers (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT,
            country TEXT
        );
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            customer_id INTEGER REFERENCES customers(id),
            total REAL
        );
        CREATE TABLE order_items (
            id INTEGER PRIMARY KEY,
            order_id INTEGER REFERENCES orders(id),
            sku TEXT
        );

        INSERT INTO customers VALUES
            (1, 'Ada Lovelace', 'ada@example.com', 'GB'),
            (2, 'Grace Hopper', 'grace@example.com', 'US'),
            (3, 'Konrad Zuse', 'konrad@example.de', 'DE'),
            (4, 'Emmy Noether', 'emmy@example.de', 'DE');
        INSERT INTO orders VALUES
            (10, 1, 12.5),
            (11, 3, 99.0),
            (12, 3, 5.0),
            (13, 2, 42.0),
            (14, 4, 17.25);
        INSERT INTO order_items VALUES
            (100, 10, 'A-1'),
            (101, 11, 'B-2'),
            (102, 12, 'C-3'),
            (103, 13, 'D-4'),
            (104, 14, 'E-5');
        """
    )
    yield connection
    connection.close()


@pytest.fixture
def shop_config():
    """Dump policy for the shop database: German customers and their data."""
    return parse_dump_config(
        {
            "tables": {
                "customers": {
                    "filters": [["eq", "country", "DE"]],
                    "order_by": "id",
                    "converters": {
                        "email": [{"mask": {"kind": "email"}}],
                        "name": [
                            {"hash": {"salt": "unit-test-salt", "truncate": 8}},
                            {"template": {"template": "customer-{value}"}},
                        ],
                    },
                },
                "orders": {
                    "filters": [["depends", "customer_id", "customers.id"]],
                    "order_by": "id",
                },
                "order_items": {
                    "filters": [["depends", "order_id", "orders.id"]],
                    "converters": {"sku": ["null"]},
                },
            }
        }
    )
