from .inventory import InventoryItem, InventoryTransaction, InventorySettings, TransactionType
