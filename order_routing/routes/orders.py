from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging
from order_routing.database import get_db
from order_routing.db.crud import order as order_crud
from order_routing.db.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate, OrderStats
from order_routing.constants.orders import OrderStatusError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/orders",
    tags=["orders"]
)

@router.get("/", response_model=List[OrderRead])
def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    store_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List orders, newest first"""
    try:
        return order_crud.get_orders(db, skip=skip, limit=limit, status=status_filter, store_id=store_id)
    except OrderStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/stats", response_model=OrderStats)
def get_order_stats(db: Session = Depends(get_db)):
    """Order counts per status"""
    return order_crud.get_order_stats(db)

@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db)
):
    """Create a pending, unassigned order"""
    try:
        db_order = order_crud.create_order(db, order)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    logger.info(f"Created order {db_order.id} for main store {db_order.main_store_name!r}")
    return db_order

@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: int,
    db: Session = Depends(get_db)
):
    db_order = order_crud.get_order(db, order_id)
    if not db_order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return db_order

@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: int,
    update: OrderStatusUpdate,
    db: Session = Depends(get_db)
):
    """Change an order's status; pending releases the store"""
    db_order = order_crud.get_order(db, order_id)
    if not db_order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    try:
        return order_crud.update_order_status(db, db_order, update.order_status)
    except OrderStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int,
    db: Session = Depends(get_db)
):
    if not order_crud.delete_order(db, order_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
