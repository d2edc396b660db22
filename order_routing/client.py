"""
HTTP client for the order routing edge endpoints (get-order, assign-order,
auto-assign-orders).

Transport errors and 5xx responses are treated as transient and retried with
a linear backoff. 4xx responses are permanent and come back as a failure dict.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

def is_transient(error: Exception) -> bool:
    """Transport failures and server-side errors are worth retrying."""
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return False

def retry_request(
    fn: Callable[[], T],
    max_retries: int = 3,
    delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call `fn` up to `max_retries` times, waiting `delay * attempt` between tries.

    At least one attempt is always made. Non-transient errors are raised
    immediately.
    """
    max_retries = max(max_retries, 1)
    last_error: Optional[Exception] = None
    for attempt in range(1, max_retries + 1):
        try:
            return fn()
        except Exception as e:
            if not is_transient(e):
                raise
            last_error = e
            logger.warning(f"Retry {attempt}/{max_retries} failed: {e}")
            if attempt < max_retries:
                sleep(delay * attempt)
    raise last_error

def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail") or body.get("message")
        if message:
            # FastAPI validation errors carry a list of dicts in "detail"
            return message if isinstance(message, str) else str(message)
        return f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}"

class OrderRoutingClient:
    """Thin wrapper around the three edge endpoints."""

    def __init__(
        self,
        base_url: str,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        def send():
            response = self._client.post(path, json=body)
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            response = retry_request(send, self.max_retries, self.retry_delay)
        except httpx.HTTPStatusError as e:
            logger.error(f"{path} failed after {self.max_retries} attempts: {e}")
            return {"success": False, "error": _error_message(e.response)}
        except httpx.TransportError as e:
            logger.error(f"{path} failed after {self.max_retries} attempts: {e}")
            return {"success": False, "error": f"Network error: {e}"}

        if response.status_code >= 400:
            return {"success": False, "error": _error_message(response)}
        return response.json()

    def get_order(self, order_id: Optional[int]) -> Dict[str, Any]:
        if not order_id:
            return {"success": False, "error": "Order ID is required"}
        return self._post("/get-order", {"orderId": order_id})

    def assign_order(self, order_id: Optional[int], store_id: Optional[int]) -> Dict[str, Any]:
        if not order_id or not store_id:
            return {"success": False, "error": "Order ID and Store ID are required"}
        return self._post("/assign-order", {"orderId": order_id, "storeId": store_id})

    def auto_assign_orders(self) -> Dict[str, Any]:
        result = self._post("/auto-assign-orders", {})
        result.setdefault("assigned_count", 0)
        return result
