from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime, timezone
from models.inventory import TransactionType

DEFAULT_CATEGORIES = [
    "Cement",
    "Steel",
    "Tiles",
    "Paint",
    "Plumbing",
    "Electrical",
    "Hardware",
]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # naive timestamps (sqlite, legacy files) are stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base for payloads that travel as camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class InventoryItemBase(CamelModel):
    name: str
    sku: str = ""
    category: str = ""
    supplier: str = ""
    location: str = ""
    quantity: int = Field(0, ge=0)
    unit_price: float = Field(0, ge=0)
    reorder_point: int = Field(10, ge=0)

class InventoryItemCreate(InventoryItemBase):
    pass

class InventoryItemUpdate(CamelModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    location: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    unit_price: Optional[float] = Field(None, ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

class InventoryItem(InventoryItemBase):
    id: str
    quantity_sold: int = Field(0, ge=0)
    created_at: datetime
    last_sold_date: Optional[datetime] = None

    @field_validator('created_at', 'last_sold_date')
    @classmethod
    def assume_utc(cls, v):
        return _as_utc(v)

class SaleRequest(CamelModel):
    quantity: int = Field(gt=0)
    notes: Optional[str] = None


class Transaction(CamelModel):
    id: str
    item_id: str
    type: TransactionType
    quantity: int = Field(ge=0)
    timestamp: datetime
    notes: Optional[str] = None

    @field_validator('timestamp')
    @classmethod
    def assume_utc(cls, v):
        return _as_utc(v)


class StoreSettings(CamelModel):
    low_stock_threshold: int = Field(10, ge=0)
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))

class StoreSettingsUpdate(CamelModel):
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    categories: Optional[List[str]] = None


class InventoryData(CamelModel):
    """Everything a store persists: items, the transaction log and settings."""

    items: List[InventoryItem] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    settings: StoreSettings = Field(default_factory=StoreSettings)
