"""
Pytest fixtures for the inventory API tests.

Provides item factories, a fixed clock, JSON and SQL stores in a temporary
directory, and a TestClient wired to them.
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from database import make_session_factory
from schemas.inventory import InventoryItem, Transaction
from store import JsonFileStore, SqlStore

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def now() -> datetime:
    """Fixed wall clock used for dead-stock evaluation."""
    return NOW


@pytest.fixture
def make_item():
    """Factory for items; created yesterday with recent sales unless told otherwise."""
    counter = {"n": 0}

    def _make(**overrides) -> InventoryItem:
        counter["n"] += 1
        fields = {
            "id": f"item-{counter['n']}",
            "name": f"Item {counter['n']}",
            "sku": f"SKU-{counter['n']:03d}",
            "category": "Cement",
            "supplier": "Acme Supplies",
            "location": "Warehouse A",
            "quantity": 10,
            "unit_price": 1.0,
            "reorder_point": 5,
            "quantity_sold": 0,
            "created_at": NOW - timedelta(days=1),
            "last_sold_date": None,
        }
        fields.update(overrides)
        return InventoryItem(**fields)

    return _make


@pytest.fixture
def make_transaction():
    counter = {"n": 0}

    def _make(**overrides) -> Transaction:
        counter["n"] += 1
        fields = {
            "id": f"tx-{counter['n']}",
            "item_id": "item-1",
            "type": "ADD",
            "quantity": 1,
            "timestamp": NOW - timedelta(minutes=100 - counter["n"]),
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make


# =============================================================================
# STORE FIXTURES
# =============================================================================

@pytest.fixture
def json_store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "inventory.json")


@pytest.fixture
def sql_store(tmp_path) -> SqlStore:
    return SqlStore(make_session_factory(f"sqlite:///{tmp_path / 'inventory.db'}"))


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest.fixture
def app(json_store: JsonFileStore):
    """FastAPI application backed by a temporary JSON store and a fixed clock."""
    from dependencies import get_now
    from main import app as fastapi_app
    from store import get_store

    fastapi_app.dependency_overrides[get_store] = lambda: json_store
    fastapi_app.dependency_overrides[get_now] = lambda: NOW
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
