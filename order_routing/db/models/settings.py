from sqlalchemy import Column, Integer, Boolean, DateTime
from sqlalchemy.sql import func
from order_routing.database import Base

class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    auto_assign_enabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Settings(id={self.id}, auto_assign_enabled={self.auto_assign_enabled})>"
