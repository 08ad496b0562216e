from typing import Dict, List, Union
from enum import Enum
from schemas.inventory import CamelModel, InventoryItem, StoreSettings, Transaction

class ValueClass(str, Enum):
    A = "A"
    B = "B"
    C = "C"

class ValueMetric(str, Enum):
    REVENUE = "revenue"
    ON_HAND = "on_hand"

class LowStockRule(str, Enum):
    REORDER_POINT = "reorder_point"
    THRESHOLD = "threshold"

TURNOVER_NOT_AVAILABLE = "N/A"


class ClassifiedItem(InventoryItem):
    total_value: float
    revenue: float
    value_class: ValueClass
    is_dead_stock: bool

class InventoryListing(CamelModel):
    items: List[ClassifiedItem]
    settings: StoreSettings

class Analytics(CamelModel):
    total_items: int
    total_value: float
    low_stock_count: int
    low_stock_items: List[ClassifiedItem]
    abc_distribution: Dict[str, int]
    category_distribution: Dict[str, int]
    recent_transactions: List[Transaction]
    turnover_ratio: Union[float, str]
    dead_stock_count: int
    value_metric: ValueMetric = ValueMetric.REVENUE
