from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func
from typing import List, Optional, Dict, Iterable
from datetime import datetime
import logging
from order_routing.db.models.order import Order
from order_routing.db.models.store import Store
from order_routing.db.schemas.order import OrderCreate, OrderItem
from order_routing.db.schemas.assignment import AutoAssignResult
from order_routing.db.crud import store as store_crud
from order_routing.db.crud.settings import is_auto_assign_enabled
from order_routing.constants.orders import (
    OrderStatus,
    check_transition,
    empty_status_counts,
    parse_status,
)

logger = logging.getLogger(__name__)

def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()

def get_orders(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None,
    store_id: Optional[int] = None,
) -> List[Order]:
    query = db.query(Order)
    if status is not None:
        query = query.filter(Order.order_status == parse_status(status).value)
    if store_id is not None:
        query = query.filter(Order.assigned_store_id == store_id)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).offset(skip).limit(limit).all()

def get_pending_orders(db: Session) -> List[Order]:
    return (
        db.query(Order)
        .filter(
            Order.assigned_store_id.is_(None),
            Order.order_status == OrderStatus.PENDING.value,
        )
        .order_by(Order.id)
        .all()
    )

def get_order_stats(db: Session, store_id: Optional[int] = None) -> Dict[str, int]:
    query = db.query(Order.order_status, func.count(Order.id))
    if store_id is not None:
        query = query.filter(Order.assigned_store_id == store_id)

    counts = empty_status_counts()
    for status, count in query.group_by(Order.order_status).all():
        counts["total"] += count
        key = status or OrderStatus.PENDING.value
        if key in counts:
            counts[key] += count
    return counts

def calculate_order_total(items: Iterable[OrderItem]) -> float:
    return sum(item.price * (item.quantity or 1) for item in items)

def create_order(db: Session, order: OrderCreate) -> Order:
    data = order.model_dump(exclude={"items", "total_amount"})
    total = order.total_amount
    if total is None:
        total = calculate_order_total(order.items)
    db_order = Order(
        **data,
        items=[item.model_dump() for item in order.items],
        total_amount=total,
        order_status=OrderStatus.PENDING.value,
        assigned_store_id=None,
    )
    db.add(db_order)
    db.commit()
    db.refresh(db_order)
    return db_order

def delete_order(db: Session, order_id: int) -> bool:
    db_order = get_order(db, order_id)
    if db_order:
        db.delete(db_order)
        db.commit()
        return True
    return False

def assign_order(db: Session, order_id: int, store_id: int) -> Optional[Order]:
    """Point an order at a store and mark it assigned in one UPDATE.

    Returns None when the order does not exist. The caller checks the store.
    """
    updated = (
        db.query(Order)
        .filter(Order.id == order_id)
        .update(
            {
                Order.assigned_store_id: store_id,
                Order.order_status: OrderStatus.ASSIGNED.value,
                Order.updated_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        return None
    db.commit()
    return get_order(db, order_id)

def update_order_status(db: Session, db_order: Order, new_status: str) -> Order:
    """Apply a status change, keeping the store and status consistent.

    Raises OrderStatusError for unknown statuses or for store-bound statuses
    on an unassigned order.
    """
    status = parse_status(new_status)
    store_id = None if status == OrderStatus.PENDING else db_order.assigned_store_id
    check_transition(status, store_id)

    db.query(Order).filter(Order.id == db_order.id).update(
        {
            Order.order_status: status.value,
            Order.assigned_store_id: store_id,
            Order.updated_at: datetime.utcnow(),
        },
        synchronize_session=False,
    )
    db.commit()
    db.refresh(db_order)
    return db_order

# --- Auto-assignment ---

def build_store_index(stores: Iterable[Store]) -> Dict[str, Store]:
    """Key stores by lower-cased name. On duplicate names the first store wins."""
    index: Dict[str, Store] = {}
    for store in stores:
        if store.name:
            index.setdefault(store.name.lower(), store)
    return index

def match_store(main_store_name: Optional[str], index: Dict[str, Store]) -> Optional[Store]:
    """Exact, case-insensitive lookup. No trimming or partial matching."""
    if not main_store_name:
        return None
    return index.get(main_store_name.lower())

def claim_order(db: Session, order_id: int, store_id: int) -> bool:
    """Assign a still-pending order. False if another run already took it."""
    claimed = (
        db.query(Order)
        .filter(
            Order.id == order_id,
            Order.assigned_store_id.is_(None),
            Order.order_status == OrderStatus.PENDING.value,
        )
        .update(
            {
                Order.assigned_store_id: store_id,
                Order.order_status: OrderStatus.ASSIGNED.value,
                Order.updated_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return claimed == 1

def auto_assign_pending_orders(db: Session) -> AutoAssignResult:
    """Route every pending, unassigned order to the store its main_store_name names.

    Loading failures propagate as SQLAlchemyError. Failures on a single order
    are rolled back and counted, and the batch carries on.
    """
    if not is_auto_assign_enabled(db):
        logger.info("Auto-assignment is disabled")
        return AutoAssignResult(success=False, message="Auto-assignment is disabled")

    orders = get_pending_orders(db)
    logger.info(f"Found {len(orders)} pending orders")
    stores = store_crud.get_all_stores(db)
    logger.info(f"Found {len(stores)} stores")
    index = build_store_index(stores)

    # Plain values so a rollback mid-batch does not expire what we iterate
    pending = [(order.id, order.main_store_name) for order in orders]
    result = AutoAssignResult()

    for order_id, main_store_name in pending:
        store = match_store(main_store_name, index)
        if store is None:
            logger.info(f"No matching store found for order {order_id}: {main_store_name!r}")
            result.unmatched_count += 1
            continue

        try:
            if claim_order(db, order_id, store.id):
                logger.info(f"Assigned order {order_id} to store {store.name}")
                result.assigned_count += 1
            else:
                logger.info(f"Order {order_id} was assigned by another run, skipping")
                result.skipped_count += 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error assigning order {order_id}: {e}")
            result.error_count += 1
            result.errors.append(f"Order {order_id}: {e}")

    result.message = f"Successfully assigned {result.assigned_count} orders"
    logger.info(
        f"{result.message} ({result.unmatched_count} unmatched, "
        f"{result.error_count} errors, {result.skipped_count} skipped)"
    )
    return result
