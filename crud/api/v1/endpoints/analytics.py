from fastapi import APIRouter, Depends
from datetime import datetime
from dependencies import get_store, get_now, get_value_metric, get_low_stock_rule, get_recent_limit
from schemas.analytics import Analytics, LowStockRule, ValueMetric
from crud import inventory
from store import InventoryStore

router = APIRouter()

@router.get("/", response_model=Analytics)
def get_inventory_analytics(
    store: InventoryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    metric: ValueMetric = Depends(get_value_metric),
    low_stock_rule: LowStockRule = Depends(get_low_stock_rule),
    recent_limit: int = Depends(get_recent_limit),
):
    """
    Dashboard figures: totals, low stock, ABC and category distribution,
    recent transactions, turnover ratio and dead stock count
    """
    return inventory.get_inventory_analytics(store, now, metric, low_stock_rule, recent_limit)
