"""
Order status constants and transition rules
"""

from enum import Enum
from typing import Dict, Optional

class OrderStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    DELIVERED = "delivered"
    RETURNED = "returned"

# Statuses that only make sense once a store owns the order
STORE_BOUND_STATUSES = {
    OrderStatus.ASSIGNED,
    OrderStatus.DELIVERED,
    OrderStatus.RETURNED,
}

class OrderStatusError(ValueError):
    """Raised when a status change would break the store/status pairing"""

def parse_status(value: Optional[str]) -> OrderStatus:
    """Normalize a status string; null is treated as pending."""
    if value is None:
        return OrderStatus.PENDING
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise OrderStatusError(f"Invalid order status '{value}'. Allowed: {allowed}")

def requires_store(status: OrderStatus) -> bool:
    return status in STORE_BOUND_STATUSES

def check_transition(new_status: OrderStatus, assigned_store_id: Optional[int]) -> None:
    """Reject a transition that would leave an order half-assigned."""
    if requires_store(new_status) and assigned_store_id is None:
        raise OrderStatusError(
            f"Order must be assigned to a store before it can be marked '{new_status.value}'"
        )

def empty_status_counts() -> Dict[str, int]:
    counts = {"total": 0}
    for status in OrderStatus:
        counts[status.value] = 0
    return counts
