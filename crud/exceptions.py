class InventoryError(Exception):
    """Base class for errors raised by inventory operations."""


class ItemNotFoundError(InventoryError):
    def __init__(self, item_id: str):
        super().__init__(f"Inventory item {item_id} not found")
        self.item_id = item_id


class InsufficientStockError(InventoryError):
    def __init__(self, item_id: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for item {item_id}: {available} available, {requested} requested"
        )
        self.item_id = item_id
        self.available = available
        self.requested = requested


class StoreError(InventoryError):
    """The backing store could not be read or written."""
