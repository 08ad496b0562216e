from .inventory import (
    InventoryItem, InventoryItemCreate, InventoryItemUpdate,
    SaleRequest, Transaction,
    StoreSettings, StoreSettingsUpdate, InventoryData
)
from .analytics import ClassifiedItem, InventoryListing, Analytics, ValueClass, ValueMetric, LowStockRule
