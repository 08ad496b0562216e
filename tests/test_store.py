"""
Tests for the JSON file and SQL stores.
"""

import json
from datetime import datetime, timedelta, timezone
from concurrent.futures import ThreadPoolExecutor

import pytest

from crud import inventory
from crud.exceptions import StoreError
from schemas.inventory import InventoryData, InventoryItemCreate, SaleRequest, StoreSettings


@pytest.fixture(params=["json", "sql"])
def store(request, json_store, sql_store):
    return json_store if request.param == "json" else sql_store


class TestStoreRoundTrip:
    """Behaviour both backends share."""

    def test_empty_store_has_default_settings(self, store):
        data = store.load()
        assert data.items == []
        assert data.transactions == []
        assert data.settings == StoreSettings()

    def test_round_trip_keeps_order_and_fields(self, store, make_item, make_transaction, now):
        items = [make_item(name="Zinc Sheet"), make_item(name="Angle Iron", last_sold_date=now, quantity_sold=4)]
        transactions = [make_transaction(item_id=items[0].id), make_transaction(item_id=items[1].id, type="SALE")]
        store.save(InventoryData(items=items, transactions=transactions, settings=StoreSettings(low_stock_threshold=3)))

        loaded = store.load()
        assert loaded.items == items
        assert loaded.transactions == transactions
        assert loaded.settings.low_stock_threshold == 3

    def test_unit_price_keeps_full_precision(self, store, make_item):
        store.save(InventoryData(items=[make_item(unit_price=0.125), make_item(unit_price=19.999)]))

        assert [item.unit_price for item in store.load().items] == [0.125, 19.999]

    def test_deleted_items_disappear_but_transactions_remain(self, store, now):
        created = inventory.create_inventory_item(store, InventoryItemCreate(name="Pipe", quantity=3), now)
        inventory.delete_inventory_item(store, created.id)

        data = store.load()
        assert data.items == []
        assert [t.item_id for t in data.transactions] == [created.id]

    def test_failed_mutation_is_not_saved(self, store, make_item):
        store.save(InventoryData(items=[make_item()]))

        with pytest.raises(RuntimeError):
            with store.mutate() as data:
                data.items.clear()
                raise RuntimeError("boom")

        assert len(store.load().items) == 1

    def test_concurrent_sales_do_not_lose_updates(self, store, now):
        created = inventory.create_inventory_item(store, InventoryItemCreate(name="Nails", quantity=100), now)

        def sell_one(_):
            return inventory.sell_inventory_item(store, created.id, SaleRequest(quantity=1), now)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(sell_one, range(20)))

        item = inventory.get_inventory_item(store, created.id)
        assert item.quantity == 80
        assert item.quantity_sold == 20
        assert len(store.load().transactions) == 21


class TestJsonFileStore:

    def test_file_is_created_on_first_load(self, json_store):
        assert not json_store.path.exists()
        json_store.load()

        raw = json.loads(json_store.path.read_text(encoding="utf-8"))
        assert raw["items"] == []
        assert raw["settings"]["lowStockThreshold"] == 10

    def test_file_uses_camel_case_keys(self, json_store, now):
        inventory.create_inventory_item(json_store, InventoryItemCreate(name="Brush", unit_price=80, quantity=2), now)

        raw = json.loads(json_store.path.read_text(encoding="utf-8"))
        item = raw["items"][0]
        assert {"unitPrice", "reorderPoint", "quantitySold", "createdAt", "lastSoldDate"} <= set(item)
        assert raw["transactions"][0]["itemId"] == item["id"]

    def test_reads_legacy_file_written_by_the_node_backend(self, json_store):
        json_store.path.write_text(json.dumps({
            "items": [{
                "id": "1718000000000",
                "name": "PPC Cement",
                "sku": "CEM-PPC",
                "category": "Cement",
                "quantity": 120,
                "unitPrice": 380,
                "reorderPoint": 20,
                "supplier": "UltraTech",
                "location": "Warehouse A",
                "createdAt": "2024-06-10T08:00:00.000Z",
                "quantitySold": 0,
            }],
            "transactions": [],
            "settings": {"lowStockThreshold": 10, "categories": ["Cement"]},
        }), encoding="utf-8")

        data = json_store.load()
        assert data.items[0].unit_price == 380
        assert data.items[0].created_at.tzinfo is not None

    def test_corrupt_file_raises_store_error(self, json_store):
        json_store.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError):
            json_store.load()


class TestSqlStore:

    def test_settings_row_is_updated_in_place(self, sql_store):
        sql_store.save(InventoryData(settings=StoreSettings(low_stock_threshold=7, categories=["Tiles"])))
        sql_store.save(InventoryData(settings=StoreSettings(low_stock_threshold=2, categories=["Paint"])))

        settings = sql_store.load().settings
        assert settings.low_stock_threshold == 2
        assert settings.categories == ["Paint"]

    def test_loaded_timestamps_are_utc(self, sql_store, make_item):
        sql_store.save(InventoryData(items=[make_item()]))
        assert sql_store.load().items[0].created_at.tzinfo is not None

    def test_offset_timestamps_keep_their_instant(self, sql_store, make_item, make_transaction):
        ist = timezone(timedelta(hours=5, minutes=30))
        created = datetime(2025, 12, 1, 9, 30, tzinfo=ist)
        sold = datetime(2026, 1, 10, 18, 0, tzinfo=ist)
        sql_store.save(InventoryData(
            items=[make_item(created_at=created, last_sold_date=sold, quantity_sold=2)],
            transactions=[make_transaction(timestamp=sold)],
        ))

        data = sql_store.load()
        assert data.items[0].created_at == created
        assert data.items[0].created_at.utcoffset() == timedelta(0)
        assert data.items[0].last_sold_date == sold
        assert data.transactions[0].timestamp == sold
