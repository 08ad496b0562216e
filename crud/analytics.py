"""
ABC value classification, dead-stock detection and inventory summaries.

Everything here is a pure function of the items, transactions and the `now`
passed in. Nothing reads the clock or touches the store, so the listing,
analytics and report endpoints all classify with the same code.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple, Union
from schemas.inventory import InventoryItem, StoreSettings, Transaction
from schemas.analytics import (
    Analytics, ClassifiedItem, LowStockRule, ValueClass, ValueMetric,
    TURNOVER_NOT_AVAILABLE,
)

A_CUTOFF_PERCENT = 80
B_CUTOFF_PERCENT = 95

NEVER_SOLD_MAX_AGE = timedelta(days=90)
SINCE_LAST_SALE_MAX_AGE = timedelta(days=180)
# sales velocity for items sold before lastSoldDate was tracked
VELOCITY_WINDOW_DAYS = 30
MIN_SALES_PER_DAY = 0.01
MAX_DAYS_OF_STOCK = 365

_DOWNGRADE = {
    ValueClass.A: ValueClass.B,
    ValueClass.B: ValueClass.C,
    ValueClass.C: ValueClass.C,
}


def item_value(item: InventoryItem, metric: ValueMetric = ValueMetric.REVENUE) -> float:
    if metric == ValueMetric.ON_HAND:
        return item.unit_price * item.quantity
    return item.unit_price * item.quantity_sold


def classify(items: Sequence[InventoryItem], metric: ValueMetric = ValueMetric.REVENUE) -> List[Tuple[InventoryItem, ValueClass]]:
    """
    Running Pareto cut over the items ranked by value, highest first.

    An item is A while the cumulative share up to and including it is at most
    80%, B up to 95%, C beyond. Equal values keep their input order. With no
    value anywhere every item is C.
    """
    ranked = sorted(items, key=lambda item: item_value(item, metric), reverse=True)
    total = sum(item_value(item, metric) for item in ranked)

    if total <= 0:
        return [(item, ValueClass.C) for item in ranked]

    classified = []
    cumulative = 0.0
    for item in ranked:
        cumulative += item_value(item, metric)
        percentage = cumulative * 100 / total

        if percentage <= A_CUTOFF_PERCENT:
            value_class = ValueClass.A
        elif percentage <= B_CUTOFF_PERCENT:
            value_class = ValueClass.B
        else:
            value_class = ValueClass.C
        classified.append((item, value_class))
    return classified


def is_dead_stock(item: InventoryItem, now: datetime) -> bool:
    """
    Heuristic for stock that is unlikely to sell. The first matching rule wins:

    1. nothing on hand -> never dead stock
    2. never sold -> dead once the item is older than 90 days
    3. has a recorded last sale -> dead once that sale is older than 180 days
    4. sold, but no sale date on record -> dead when the on-hand quantity
       would last more than 365 days at quantity_sold / 30 units per day
    """
    if item.quantity == 0:
        return False

    if item.quantity_sold == 0:
        return now - item.created_at > NEVER_SOLD_MAX_AGE

    if item.last_sold_date is not None:
        return now - item.last_sold_date > SINCE_LAST_SALE_MAX_AGE

    sales_per_day = max(item.quantity_sold / VELOCITY_WINDOW_DAYS, MIN_SALES_PER_DAY)
    days_of_stock = item.quantity / sales_per_day
    return days_of_stock > MAX_DAYS_OF_STOCK


def downgrade(value_class: ValueClass) -> ValueClass:
    return _DOWNGRADE[value_class]


def classify_items(items: Sequence[InventoryItem], now: datetime, metric: ValueMetric = ValueMetric.REVENUE) -> List[ClassifiedItem]:
    """Classify the items and drop dead stock one class, in ranking order."""
    result = []
    for item, value_class in classify(items, metric):
        dead = is_dead_stock(item, now)
        result.append(ClassifiedItem(
            **item.model_dump(),
            total_value=item.quantity * item.unit_price,
            revenue=item.unit_price * item.quantity_sold,
            value_class=downgrade(value_class) if dead else value_class,
            is_dead_stock=dead,
        ))
    return result


def is_low_stock(item: InventoryItem, rule: LowStockRule = LowStockRule.REORDER_POINT, threshold: int = 10) -> bool:
    if rule == LowStockRule.THRESHOLD:
        return item.quantity <= threshold
    return item.quantity <= item.reorder_point


def turnover_ratio(items: Sequence[InventoryItem]) -> Union[float, str]:
    if not items:
        return TURNOVER_NOT_AVAILABLE

    average_on_hand = sum(item.quantity for item in items) / len(items)
    if average_on_hand == 0:
        return TURNOVER_NOT_AVAILABLE

    total_sold = sum(item.quantity_sold for item in items)
    return total_sold / average_on_hand


def newest_first(transactions: Sequence[Transaction]) -> List[Transaction]:
    # stable sort, so transactions sharing a timestamp come out latest-recorded first
    ordered = sorted(transactions, key=lambda t: t.timestamp)
    return list(reversed(ordered))


def recent_transactions(transactions: Sequence[Transaction], limit: int = 10) -> List[Transaction]:
    if limit <= 0:
        return []
    return newest_first(transactions)[:limit]


def summarize(
    items: Sequence[InventoryItem],
    transactions: Sequence[Transaction],
    now: datetime,
    settings: Optional[StoreSettings] = None,
    metric: ValueMetric = ValueMetric.REVENUE,
    low_stock_rule: LowStockRule = LowStockRule.REORDER_POINT,
    recent_limit: int = 10,
) -> Analytics:
    settings = settings or StoreSettings()
    classified = classify_items(items, now, metric)

    abc_distribution: Dict[str, int] = {value_class.value: 0 for value_class in ValueClass}
    category_distribution: Dict[str, int] = {}
    for item in classified:
        abc_distribution[item.value_class.value] += 1
        category_distribution[item.category] = category_distribution.get(item.category, 0) + 1

    low_stock_items = [
        item for item in classified
        if is_low_stock(item, low_stock_rule, settings.low_stock_threshold)
    ]

    return Analytics(
        total_items=len(classified),
        total_value=sum(item.total_value for item in classified),
        low_stock_count=len(low_stock_items),
        low_stock_items=low_stock_items,
        abc_distribution=abc_distribution,
        category_distribution=category_distribution,
        recent_transactions=recent_transactions(transactions, recent_limit),
        turnover_ratio=turnover_ratio(items),
        dead_stock_count=sum(1 for item in classified if item.is_dead_stock),
        value_metric=metric,
    )
