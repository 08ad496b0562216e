"""
Persistence for the inventory aggregate (items, transactions, settings).

A store only knows how to load and save the whole aggregate. Mutating
operations go through `InventoryStore.mutate()`, which holds the store's write
lock for the full read-modify-write cycle so concurrent requests cannot lose
each other's updates.
"""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from config import get_settings
from crud.exceptions import StoreError
from database import Base, get_session_factory
from models import inventory as models
from schemas.inventory import InventoryData, InventoryItem, StoreSettings, Transaction

logger = logging.getLogger(__name__)


class InventoryStore:
    def __init__(self):
        self._write_lock = threading.Lock()

    def load(self) -> InventoryData:
        raise NotImplementedError

    def save(self, data: InventoryData) -> None:
        raise NotImplementedError

    @contextmanager
    def mutate(self) -> Iterator[InventoryData]:
        """
        Load the aggregate under the write lock, hand it to the caller and save
        it back once the block finishes. Nothing is saved if the block raises.
        """
        with self._write_lock:
            data = self.load()
            yield data
            self.save(data)


class JsonFileStore(InventoryStore):
    """The whole aggregate in one camelCase JSON document."""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._init_lock = threading.Lock()

    def initialize(self) -> None:
        with self._init_lock:
            if not self.path.exists():
                logger.info("Creating inventory data file at %s", self.path)
                self.save(InventoryData())

    def load(self) -> InventoryData:
        self.initialize()
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            return InventoryData.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error("Failed to read inventory data from %s: %s", self.path, e)
            raise StoreError(f"Could not read inventory data from {self.path}") from e

    def save(self, data: InventoryData) -> None:
        payload = data.model_dump(mode="json", by_alias=True)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error("Failed to write inventory data to %s: %s", self.path, e)
            raise StoreError(f"Could not write inventory data to {self.path}") from e


class SqlStore(InventoryStore):
    """The same aggregate kept in SQLAlchemy tables."""

    SETTINGS_ROW_ID = 1

    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self.session_factory = session_factory
        Base.metadata.create_all(bind=session_factory.kw["bind"])

    def load(self) -> InventoryData:
        try:
            with self.session_factory() as db:
                items = db.query(models.InventoryItem).order_by(models.InventoryItem.seq).all()
                transactions = db.query(models.InventoryTransaction).order_by(models.InventoryTransaction.seq).all()
                settings_row = db.get(models.InventorySettings, self.SETTINGS_ROW_ID)

                return InventoryData(
                    items=[_item_from_row(row) for row in items],
                    transactions=[_transaction_from_row(row) for row in transactions],
                    settings=_settings_from_row(settings_row),
                )
        except SQLAlchemyError as e:
            logger.error("Failed to load inventory data: %s", e)
            raise StoreError("Could not read inventory data from the database") from e

    def save(self, data: InventoryData) -> None:
        with self.session_factory() as db:
            try:
                keep_ids = {item.id for item in data.items}
                for (item_id,) in db.query(models.InventoryItem.id).all():
                    if item_id not in keep_ids:
                        db.query(models.InventoryItem).filter(models.InventoryItem.id == item_id).delete()

                for seq, item in enumerate(data.items):
                    db.merge(_item_to_row(item, seq))

                # the transaction log is append-only
                known_ids = {t_id for (t_id,) in db.query(models.InventoryTransaction.id).all()}
                for seq, transaction in enumerate(data.transactions):
                    if transaction.id not in known_ids:
                        db.add(_transaction_to_row(transaction, seq))

                db.merge(models.InventorySettings(
                    id=self.SETTINGS_ROW_ID,
                    low_stock_threshold=data.settings.low_stock_threshold,
                    categories=list(data.settings.categories),
                ))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("Failed to save inventory data: %s", e)
                raise StoreError("Could not write inventory data to the database") from e


# sqlite drops the offset on write, so rows always hold UTC wall time
def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)

def _item_from_row(row: models.InventoryItem) -> InventoryItem:
    return InventoryItem(
        id=row.id,
        name=row.name,
        sku=row.sku,
        category=row.category,
        supplier=row.supplier,
        location=row.location,
        quantity=row.quantity,
        unit_price=row.unit_price,
        reorder_point=row.reorder_point,
        quantity_sold=row.quantity_sold,
        created_at=row.created_at,
        last_sold_date=row.last_sold_date,
    )

def _item_to_row(item: InventoryItem, seq: int) -> models.InventoryItem:
    return models.InventoryItem(
        id=item.id,
        seq=seq,
        name=item.name,
        sku=item.sku,
        category=item.category,
        supplier=item.supplier,
        location=item.location,
        quantity=item.quantity,
        unit_price=item.unit_price,
        reorder_point=item.reorder_point,
        quantity_sold=item.quantity_sold,
        created_at=_to_utc(item.created_at),
        last_sold_date=_to_utc(item.last_sold_date),
    )

def _transaction_from_row(row: models.InventoryTransaction) -> Transaction:
    return Transaction(
        id=row.id,
        item_id=row.item_id,
        type=row.type,
        quantity=row.quantity,
        timestamp=row.timestamp,
        notes=row.notes,
    )

def _transaction_to_row(transaction: Transaction, seq: int) -> models.InventoryTransaction:
    return models.InventoryTransaction(
        id=transaction.id,
        seq=seq,
        item_id=transaction.item_id,
        type=transaction.type,
        quantity=transaction.quantity,
        timestamp=_to_utc(transaction.timestamp),
        notes=transaction.notes,
    )

def _settings_from_row(row) -> StoreSettings:
    if row is None:
        return StoreSettings()
    return StoreSettings(low_stock_threshold=row.low_stock_threshold, categories=list(row.categories))


@lru_cache
def get_store() -> InventoryStore:
    settings = get_settings()
    if settings.STORE_BACKEND == "sql":
        logger.info("Using SQL store")
        return SqlStore(get_session_factory())

    logger.info("Using JSON file store at %s", settings.DATA_FILE)
    return JsonFileStore(settings.DATA_FILE)
