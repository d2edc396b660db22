from .store import Store
from .settings import Settings
from .order import Order

__all__ = ['Store', 'Settings', 'Order']
