from fastapi import APIRouter, Depends
from dependencies import get_store
from schemas.inventory import StoreSettings, StoreSettingsUpdate
from crud import inventory
from store import InventoryStore

router = APIRouter()

@router.get("/", response_model=StoreSettings)
def get_store_settings(store: InventoryStore = Depends(get_store)):
    return inventory.get_store_settings(store)

@router.put("/", response_model=StoreSettings)
def update_store_settings(settings_update: StoreSettingsUpdate, store: InventoryStore = Depends(get_store)):
    return inventory.update_store_settings(store, settings_update)
