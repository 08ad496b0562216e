from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, JSON
from enum import Enum as PyEnum
from database import Base

class TransactionType(str, PyEnum):
    ADD = "ADD"
    RESTOCK = "RESTOCK"
    SALE = "SALE"


class InventoryItem(Base):
    __tablename__ = 'inventory_items'

    id = Column(String, primary_key=True, index=True)
    # position in the item list, keeps the listing order stable across loads
    seq = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    sku = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")
    supplier = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=10)
    quantity_sold = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_sold_date = Column(DateTime(timezone=True), nullable=True)


# item_id is a weak reference, transactions outlive deleted items
class InventoryTransaction(Base):
    __tablename__ = 'inventory_transactions'

    id = Column(String, primary_key=True, index=True)
    # insertion order, used to load transactions back in the order they were recorded
    seq = Column(Integer, nullable=False, index=True)
    item_id = Column(String, nullable=False, index=True)
    type = Column(Enum(TransactionType), nullable=False)
    quantity = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    notes = Column(String, nullable=True)


class InventorySettings(Base):
    __tablename__ = 'inventory_settings'

    id = Column(Integer, primary_key=True)
    low_stock_threshold = Column(Integer, nullable=False, default=10)
    categories = Column(JSON, nullable=False, default=list)
