"""
FastAPI dependencies shared by the routers.

The clock is a dependency too, so analytics stay reproducible under test.
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import Query

from config import get_settings
from schemas.analytics import LowStockRule, ValueMetric
from store import get_store

__all__ = ["get_store", "get_now", "get_value_metric", "get_low_stock_rule", "get_recent_limit"]


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def get_value_metric(
    metric: Optional[ValueMetric] = Query(None, description="Override the configured ABC value metric"),
) -> ValueMetric:
    if metric is not None:
        return metric
    return ValueMetric(get_settings().VALUE_METRIC)


def get_low_stock_rule() -> LowStockRule:
    return LowStockRule(get_settings().LOW_STOCK_RULE)


def get_recent_limit() -> int:
    return get_settings().RECENT_TRANSACTIONS_LIMIT
