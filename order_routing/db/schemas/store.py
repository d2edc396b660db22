from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

class StoreBase(BaseModel):
    name: str = Field(..., min_length=1, description="Display name matched against orders' main store name")

class StoreCreate(StoreBase):
    password: str = Field(..., min_length=1, description="Store dashboard password, stored hashed")

class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)

class StoreResponse(StoreBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class StoreSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
