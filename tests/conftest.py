"""
Shared test fixtures.

Every fixture that touches the database uses MockSupabaseClient; no test
needs a live Supabase project.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Generator, Optional


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data=None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else (
            len(self.data) if isinstance(self.data, list) else 1
        )


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, data: list = None, count: int = None, error: Optional[Exception] = None):
        self._data = data or []
        self._count = count
        self._error = error
        self._is_single = False

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id and timestamps
        if isinstance(data, dict):
            data = [data]
        rows = []
        for item in data:
            row = dict(item)
            row.setdefault("id", "test-uuid-123")
            row["created_at"] = _now_iso()
            row["updated_at"] = _now_iso()
            row.setdefault("is_active", True)
            rows.append(row)
        self._data = rows
        return self

    def update(self, data):
        # Merge into whatever rows the table holds; no rows means no match
        self._data = [
            {**item, **data, "updated_at": _now_iso()}
            for item in self._data
        ]
        return self

    def delete(self):
        return self

    def eq(self, column, value):
        return self

    def neq(self, column, value):
        return self

    def single(self):
        self._is_single = True
        return self

    def order(self, column, **kwargs):
        return self

    def range(self, start, end):
        return self

    def limit(self, count):
        return self

    def execute(self) -> MockSupabaseResponse:
        if self._error is not None:
            raise self._error
        if self._is_single:
            data = self._data[0] if self._data else None
            return MockSupabaseResponse(data=data, count=1 if data else 0)
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None, error: Optional[Exception] = None):
        self._data = data or []
        self._count = count
        self._error = error

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(list(self._data), self._count, self._error)

    def select(self, *args, **kwargs):
        return self._query()

    def insert(self, data):
        return self._query().insert(data)

    def update(self, data):
        return self._query().update(data)

    def delete(self):
        return self._query()


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count, "error": None}

    def set_table_error(self, table_name: str, error: Exception):
        """Make every query on a table raise `error`."""
        self._tables[table_name] = {"data": [], "count": None, "error": error}

    def table(self, name: str) -> MockSupabaseTable:
        config = self._tables.get(name, {"data": [], "count": None, "error": None})
        return MockSupabaseTable(config["data"], config["count"], config["error"])


# ===================
# FIXTURES
# ===================

COMPANY_ID = "company-1"


@pytest.fixture
def company_id() -> str:
    return COMPANY_ID


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"id": "1", "name": "Café Americano", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now any service using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.reference_data_service.get_supabase_client", return_value=mock_supabase):
                yield mock_supabase


@pytest.fixture(autouse=True)
def reset_import_state():
    """Drop import sessions and service singletons between tests."""
    import services.import_session_service as import_session_service
    import services.product_import_service as product_import_service
    import services.product_service as product_service
    import services.reference_data_service as reference_data_service

    import_session_service.clear_sessions()
    product_service._product_service = None
    reference_data_service._reference_data_service = None
    product_import_service._product_import_service = None
    yield
    import_session_service.clear_sessions()


@pytest.fixture
def sample_categories() -> list:
    """Active categories for COMPANY_ID."""
    return [
        {"id": "cat-bebidas", "name": "Bebidas", "company_id": COMPANY_ID, "is_active": True},
        {"id": "cat-comidas", "name": "Comidas", "company_id": COMPANY_ID, "is_active": True},
    ]


@pytest.fixture
def sample_product_data() -> dict:
    """Sample product row as stored."""
    return {
        "id": "prod-cafe",
        "company_id": COMPANY_ID,
        "name": "Café Americano",
        "description": "Café negro tradicional",
        "category_id": "cat-bebidas",
        "price": 5000.0,
        "cost": 1500.0,
        "stock": 100,
        "min_stock": 10,
        "is_alcoholic": False,
        "is_active": True,
        "created_at": "2026-01-10T10:00:00Z",
        "updated_at": "2026-01-10T10:00:00Z"
    }


@pytest.fixture
def sample_products_list(sample_product_data) -> list:
    """Sample list of stored products."""
    return [
        sample_product_data,
        {
            **sample_product_data,
            "id": "prod-corona",
            "name": "Cerveza Corona",
            "description": "Cerveza importada",
            "price": 8000.0,
            "cost": 4000.0,
            "stock": 50,
            "min_stock": 5,
            "is_alcoholic": True,
        },
        {
            **sample_product_data,
            "id": "prod-empanada",
            "name": "Empanada",
            "description": None,
            "category_id": "cat-comidas",
            "price": 3000.0,
            "cost": None,
            "stock": 0,
            "min_stock": 0,
        },
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_supabase):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            response = test_client_with_mock_db.get("/api/products?company_id=...")
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.reference_data_service.get_supabase_client", return_value=mock_supabase):
                yield TestClient(app)
