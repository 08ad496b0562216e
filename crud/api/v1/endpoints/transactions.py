from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from dependencies import get_store
from schemas.inventory import Transaction
from crud import inventory
from store import InventoryStore

router = APIRouter()

@router.get("/", response_model=List[Transaction])
def list_transactions(
    item_id: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    store: InventoryStore = Depends(get_store),
):
    """
    Transaction history, newest first
    """
    return inventory.get_transactions(store, item_id=item_id, skip=skip, limit=limit)
