import logging
import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING
from crud import analytics
from crud.exceptions import InsufficientStockError, ItemNotFoundError
from models.inventory import TransactionType
from schemas.inventory import (
    InventoryData, InventoryItem, InventoryItemCreate, InventoryItemUpdate,
    SaleRequest, StoreSettings, StoreSettingsUpdate, Transaction,
)
from schemas.analytics import Analytics, ClassifiedItem, InventoryListing, LowStockRule, ValueMetric

if TYPE_CHECKING:
    from store import InventoryStore

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex

def _record(item_id: str, transaction_type: TransactionType, quantity: int, now: datetime, notes: Optional[str] = None) -> Transaction:
    return Transaction(id=_new_id(), item_id=item_id, type=transaction_type, quantity=quantity, timestamp=now, notes=notes)

def _find_index(data: InventoryData, item_id: str) -> int:
    for index, item in enumerate(data.items):
        if item.id == item_id:
            return index
    raise ItemNotFoundError(item_id)

def _matches(item: InventoryItem, search: Optional[str], category: Optional[str]) -> bool:
    if category and item.category != category:
        return False
    if search:
        term = search.lower()
        return term in item.name.lower() or term in item.sku.lower()
    return True


def create_inventory_item(store: "InventoryStore", item: InventoryItemCreate, now: datetime) -> InventoryItem:
    with store.mutate() as data:
        db_item = InventoryItem(id=_new_id(), quantity_sold=0, created_at=now, **item.model_dump())
        data.items.append(db_item)
        data.transactions.append(_record(db_item.id, TransactionType.ADD, db_item.quantity, now, "Initial stock"))

    logger.info("Created inventory item %s (%s) with %d units", db_item.id, db_item.name, db_item.quantity)
    return db_item

def get_inventory_item(store: "InventoryStore", item_id: str) -> InventoryItem:
    data = store.load()
    return data.items[_find_index(data, item_id)]

def get_inventory_items(store: "InventoryStore", search: Optional[str] = None, category: Optional[str] = None) -> List[InventoryItem]:
    return [item for item in store.load().items if _matches(item, search, category)]

def update_inventory_item(store: "InventoryStore", item_id: str, item_update: InventoryItemUpdate, now: datetime) -> InventoryItem:
    """
    Apply a partial update. A quantity change is logged as one transaction:
    RESTOCK when it grows, SALE when it shrinks. A shrink counts as units sold.
    """
    with store.mutate() as data:
        index = _find_index(data, item_id)
        db_item = data.items[index]

        update_data = {k: v for k, v in item_update.model_dump(exclude_unset=True).items() if v is not None}
        notes = update_data.pop('notes', None)
        old_quantity = db_item.quantity
        db_item = db_item.model_copy(update=update_data)

        change = db_item.quantity - old_quantity
        if change > 0:
            data.transactions.append(_record(item_id, TransactionType.RESTOCK, change, now, notes or ""))
        elif change < 0:
            db_item.quantity_sold += -change
            db_item.last_sold_date = now
            data.transactions.append(_record(item_id, TransactionType.SALE, -change, now, notes or ""))

        data.items[index] = db_item

    if change:
        logger.info("Item %s quantity changed %d -> %d", item_id, old_quantity, db_item.quantity)
    return db_item

def sell_inventory_item(store: "InventoryStore", item_id: str, sale: SaleRequest, now: datetime) -> InventoryItem:
    with store.mutate() as data:
        index = _find_index(data, item_id)
        db_item = data.items[index]

        if sale.quantity > db_item.quantity:
            raise InsufficientStockError(item_id, db_item.quantity, sale.quantity)

        db_item = db_item.model_copy(update={
            'quantity': db_item.quantity - sale.quantity,
            'quantity_sold': db_item.quantity_sold + sale.quantity,
            'last_sold_date': now,
        })
        data.items[index] = db_item
        data.transactions.append(_record(item_id, TransactionType.SALE, sale.quantity, now, sale.notes or ""))

    logger.info("Sold %d units of item %s, %d left", sale.quantity, item_id, db_item.quantity)
    return db_item

def delete_inventory_item(store: "InventoryStore", item_id: str) -> InventoryItem:
    # transactions of the deleted item are kept as history
    with store.mutate() as data:
        db_item = data.items.pop(_find_index(data, item_id))

    logger.info("Deleted inventory item %s (%s)", item_id, db_item.name)
    return db_item

def get_transactions(store: "InventoryStore", item_id: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Transaction]:
    transactions = analytics.newest_first(store.load().transactions)
    if item_id:
        transactions = [t for t in transactions if t.item_id == item_id]
    return transactions[skip:skip + limit]

def get_store_settings(store: "InventoryStore") -> StoreSettings:
    return store.load().settings

def update_store_settings(store: "InventoryStore", settings_update: StoreSettingsUpdate) -> StoreSettings:
    with store.mutate() as data:
        update_data = {k: v for k, v in settings_update.model_dump(exclude_unset=True).items() if v is not None}
        data.settings = data.settings.model_copy(update=update_data)
    return data.settings


def list_classified_items(
    store: "InventoryStore",
    now: datetime,
    metric: ValueMetric = ValueMetric.REVENUE,
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> InventoryListing:
    # classes depend on the whole collection, so filter only after classifying
    data = store.load()
    classified = analytics.classify_items(data.items, now, metric)
    return InventoryListing(
        items=[item for item in classified if _matches(item, search, category)],
        settings=data.settings,
    )

def get_classified_item(store: "InventoryStore", item_id: str, now: datetime, metric: ValueMetric = ValueMetric.REVENUE) -> ClassifiedItem:
    data = store.load()
    for item in analytics.classify_items(data.items, now, metric):
        if item.id == item_id:
            return item
    raise ItemNotFoundError(item_id)

def get_inventory_analytics(
    store: "InventoryStore",
    now: datetime,
    metric: ValueMetric = ValueMetric.REVENUE,
    low_stock_rule: LowStockRule = LowStockRule.REORDER_POINT,
    recent_limit: int = 10,
) -> Analytics:
    data = store.load()
    return analytics.summarize(
        data.items,
        data.transactions,
        now,
        settings=data.settings,
        metric=metric,
        low_stock_rule=low_stock_rule,
        recent_limit=recent_limit,
    )
