# routers/store.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging
from order_routing.database import get_db
from order_routing.db.crud import store as store_crud
from order_routing.db.crud import order as order_crud
from order_routing.db.schemas.store import StoreCreate, StoreUpdate, StoreResponse
from order_routing.db.schemas.order import OrderRead, OrderStatusUpdate, OrderStats
from order_routing.constants.orders import OrderStatusError

logger = logging.getLogger(__name__)

router = APIRouter()

def get_store_or_404(db: Session, store_id: int):
    store = store_crud.get_store(db, store_id)
    if not store:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    return store

@router.get("/", response_model=List[StoreResponse])
def list_stores(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return store_crud.get_stores(db, skip=skip, limit=limit)

@router.post("/", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
def create_store(store_data: StoreCreate, db: Session = Depends(get_db)):
    if store_crud.get_store_by_name(db, store_data.name.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Store with this name already exists"
        )
    try:
        store = store_crud.create_store(db, store_data)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    logger.info(f"Created store {store.id} ({store.name})")
    return store

@router.get("/{store_id}", response_model=StoreResponse)
def get_store(store_id: int, db: Session = Depends(get_db)):
    return get_store_or_404(db, store_id)

@router.put("/{store_id}", response_model=StoreResponse)
def update_store(store_id: int, store_data: StoreUpdate, db: Session = Depends(get_db)):
    if store_data.name:
        existing = store_crud.get_store_by_name(db, store_data.name.strip())
        if existing and existing.id != store_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Store with this name already exists"
            )
    store = store_crud.update_store(db, store_id, store_data)
    if not store:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    return store

@router.delete("/{store_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_store(store_id: int, db: Session = Depends(get_db)):
    """Delete a store; its orders return to pending"""
    if not store_crud.delete_store(db, store_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    logger.info(f"Deleted store {store_id}")

# --- Store dashboard ---

@router.get("/{store_id}/orders", response_model=List[OrderRead])
def list_store_orders(
    store_id: int,
    status_filter: Optional[str] = Query(None, alias="status"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Orders assigned to one store"""
    get_store_or_404(db, store_id)
    try:
        return order_crud.get_orders(db, skip=skip, limit=limit, status=status_filter, store_id=store_id)
    except OrderStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/{store_id}/orders/stats", response_model=OrderStats)
def get_store_order_stats(store_id: int, db: Session = Depends(get_db)):
    get_store_or_404(db, store_id)
    return order_crud.get_order_stats(db, store_id=store_id)

@router.patch("/{store_id}/orders/{order_id}/status", response_model=OrderRead)
def update_store_order_status(
    store_id: int,
    order_id: int,
    update: OrderStatusUpdate,
    db: Session = Depends(get_db)
):
    """Status change made from a store's dashboard"""
    get_store_or_404(db, store_id)
    db_order = order_crud.get_order(db, order_id)
    if not db_order or db_order.assigned_store_id != store_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found for this store"
        )
    try:
        return order_crud.update_order_status(db, db_order, update.order_status)
    except OrderStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
