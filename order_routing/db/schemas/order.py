from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from order_routing.constants.orders import OrderStatus
from .store import StoreSummary

class OrderItem(BaseModel):
    name: str
    price: float = 0
    quantity: int = Field(1, ge=1)
    product_id: Optional[int] = None
    main_store: Optional[str] = None

class OrderBase(BaseModel):
    order_code: Optional[str] = None
    customer_name: str = Field(..., min_length=1)
    customer_phone: Optional[str] = None
    customer_email: Optional[EmailStr] = None
    customer_address: Optional[str] = None
    customer_city: Optional[str] = None
    customer_notes: Optional[str] = None
    main_store_name: Optional[str] = None
    items: List[OrderItem] = []

class OrderCreate(OrderBase):
    total_amount: Optional[float] = None

class OrderStatusUpdate(BaseModel):
    order_status: str

class OrderRead(OrderBase):
    id: int
    customer_email: Optional[str] = None
    assigned_store_id: Optional[int] = None
    assigned_store_name: Optional[str] = None
    order_status: OrderStatus
    total_amount: float = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class OrderDetail(OrderRead):
    store: Optional[StoreSummary] = Field(None, validation_alias="assigned_store")

class OrderStats(BaseModel):
    total: int = 0
    pending: int = 0
    assigned: int = 0
    delivered: int = 0
    returned: int = 0
