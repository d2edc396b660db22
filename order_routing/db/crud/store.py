from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from werkzeug.security import generate_password_hash
from order_routing.db.models.store import Store
from order_routing.db.models.order import Order
from order_routing.db.schemas.store import StoreCreate, StoreUpdate
from order_routing.constants.orders import OrderStatus

def get_store(db: Session, store_id: int) -> Optional[Store]:
    return db.query(Store).filter(Store.id == store_id).first()

def get_store_by_name(db: Session, name: str) -> Optional[Store]:
    return db.query(Store).filter(Store.name == name).first()

def get_stores(db: Session, skip: int = 0, limit: int = 100) -> List[Store]:
    return db.query(Store).order_by(Store.id).offset(skip).limit(limit).all()

def get_all_stores(db: Session) -> List[Store]:
    return db.query(Store).order_by(Store.id).all()

def create_store(db: Session, store: StoreCreate) -> Store:
    db_store = Store(
        name=store.name.strip(),
        password=generate_password_hash(store.password.strip()),
    )
    db.add(db_store)
    db.commit()
    db.refresh(db_store)
    return db_store

def update_store(db: Session, store_id: int, store: StoreUpdate) -> Optional[Store]:
    db_store = get_store(db, store_id)
    if db_store:
        update_data = store.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None:
                continue
            if field == "password":
                value = generate_password_hash(value.strip())
            elif field == "name":
                value = value.strip()
            setattr(db_store, field, value)
        db.commit()
        db.refresh(db_store)
    return db_store

def delete_store(db: Session, store_id: int) -> bool:
    """Delete a store and send its orders back to the pending pool."""
    db_store = get_store(db, store_id)
    if not db_store:
        return False
    db.query(Order).filter(Order.assigned_store_id == store_id).update(
        {
            Order.assigned_store_id: None,
            Order.order_status: OrderStatus.PENDING.value,
            Order.updated_at: datetime.utcnow(),
        },
        synchronize_session=False,
    )
    db.delete(db_store)
    db.commit()
    return True
