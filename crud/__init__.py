from .analytics import classify, classify_items, is_dead_stock, summarize, turnover_ratio
from .inventory import (
    create_inventory_item, get_inventory_item, get_inventory_items, update_inventory_item,
    sell_inventory_item, delete_inventory_item, get_transactions
)
