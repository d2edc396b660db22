from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List

class AssignOrderRequest(BaseModel):
    order_id: Optional[int] = Field(None, alias="orderId")
    store_id: Optional[int] = Field(None, alias="storeId")

    model_config = ConfigDict(populate_by_name=True)

class GetOrderRequest(BaseModel):
    order_id: Optional[int] = Field(None, alias="orderId")

    model_config = ConfigDict(populate_by_name=True)

class AutoAssignResult(BaseModel):
    success: bool = True
    message: str = ""
    assigned_count: int = 0
    unmatched_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    errors: List[str] = []
