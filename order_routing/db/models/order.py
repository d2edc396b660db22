from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON
from datetime import datetime
from order_routing.database import Base
from sqlalchemy.orm import relationship

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_code = Column(String, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String)
    customer_email = Column(String)
    customer_address = Column(String)
    customer_city = Column(String)
    customer_notes = Column(String)
    # Free text, matched against Store.name by the auto-assigner
    main_store_name = Column(String, index=True)
    assigned_store_id = Column(Integer, ForeignKey("stores.id"), nullable=True, index=True)
    order_status = Column(String, nullable=False, default="pending", index=True)
    total_amount = Column(Float, default=0)
    items = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    assigned_store = relationship("Store", back_populates="orders")

    @property
    def assigned_store_name(self):
        return self.assigned_store.name if self.assigned_store else None

    def __repr__(self):
        return f"<Order(id={self.id}, status='{self.order_status}', assigned_store_id={self.assigned_store_id})>"
