from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class SettingsBase(BaseModel):
    auto_assign_enabled: bool = False

class SettingsUpdate(BaseModel):
    auto_assign_enabled: Optional[bool] = None

class SettingsResponse(SettingsBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
