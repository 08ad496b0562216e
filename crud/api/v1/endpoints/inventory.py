from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime
from typing import Optional
from dependencies import get_store, get_now, get_value_metric
from schemas.inventory import InventoryItem, InventoryItemCreate, InventoryItemUpdate, SaleRequest
from schemas.analytics import ClassifiedItem, InventoryListing, ValueMetric
from crud import inventory
from crud.exceptions import InsufficientStockError, ItemNotFoundError
from store import InventoryStore

router = APIRouter()

NOT_FOUND = "Inventory item is not found"

@router.get("/", response_model=InventoryListing)
def list_inventory_items(
    search: Optional[str] = None,
    category: Optional[str] = None,
    store: InventoryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    metric: ValueMetric = Depends(get_value_metric),
):
    return inventory.list_classified_items(store, now, metric, search, category)

@router.post("/", response_model=InventoryItem, status_code=201)
def create_inventory_item(item: InventoryItemCreate, store: InventoryStore = Depends(get_store), now: datetime = Depends(get_now)):
    return inventory.create_inventory_item(store, item, now)

@router.get("/{item_id}", response_model=ClassifiedItem)
def get_inventory_item(
    item_id: str,
    store: InventoryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    metric: ValueMetric = Depends(get_value_metric),
):
    try:
        return inventory.get_classified_item(store, item_id, now, metric)
    except ItemNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

@router.put("/{item_id}", response_model=InventoryItem)
def update_inventory_item(
    item_id: str,
    item_update: InventoryItemUpdate,
    store: InventoryStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    try:
        return inventory.update_inventory_item(store, item_id, item_update, now)
    except ItemNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

@router.post("/{item_id}/sell", response_model=InventoryItem)
def sell_inventory_item(
    item_id: str,
    sale: SaleRequest,
    store: InventoryStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    try:
        return inventory.sell_inventory_item(store, item_id, sale, now)
    except ItemNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except InsufficientStockError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.delete("/{item_id}")
def delete_inventory_item(item_id: str, store: InventoryStore = Depends(get_store)):
    try:
        inventory.delete_inventory_item(store, item_id)
    except ItemNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"message": "Item deleted successfully"}
