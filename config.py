from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "Insyd Inventory API"
    APP_VERSION: str = "0.1.0"

    # "json" keeps everything in DATA_FILE, "sql" uses DATABASE_URL
    STORE_BACKEND: Literal["json", "sql"] = "json"
    DATA_FILE: str = "inventory.json"
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # "revenue" ranks by unit_price * quantity_sold, "on_hand" by unit_price * quantity
    VALUE_METRIC: Literal["revenue", "on_hand"] = "revenue"
    # "reorder_point" uses each item's reorder point, "threshold" the stored lowStockThreshold
    LOW_STOCK_RULE: Literal["reorder_point", "threshold"] = "reorder_point"
    RECENT_TRANSACTIONS_LIMIT: int = 10

    CORS_ORIGINS: List[str] = ["*"]
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

@lru_cache
def get_settings() -> Settings:
    return Settings()
