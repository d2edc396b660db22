from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Optional
import threading
import logging
import os
from order_routing.database import get_db
from order_routing.db.crud import order as order_crud
from order_routing.db.crud import store as store_crud
from order_routing.db.schemas.assignment import AssignOrderRequest, GetOrderRequest
from order_routing.db.schemas.order import OrderRead, OrderDetail

logger = logging.getLogger(__name__)

# Edge endpoints keep the flat, POST-only paths the dashboards call
router = APIRouter(tags=["assignment"])

AUTO_ASSIGN_INTERVAL_SECONDS = float(os.getenv("AUTO_ASSIGN_INTERVAL_SECONDS", "0"))

# Marks a body that is present but not valid JSON
INVALID_BODY = object()

def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})

async def read_json_body(request: Request) -> Any:
    """Raw JSON body; an empty body reads as {}.

    Bad input is answered with the {success, error} envelope, never a 422.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return await request.json()
    except ValueError:
        return INVALID_BODY

def parse_payload(model, body: Any):
    """Validate a raw body against `model`. Returns (payload, error_response)."""
    if body is INVALID_BODY:
        logger.error("Error reading request body")
        return None, error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")
    try:
        return model.model_validate(body), None
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc")) or "body"
        return None, error_response(status.HTTP_400_BAD_REQUEST, f"Invalid request body: {fields}")

@router.post("/assign-order")
def assign_order(
    body: Any = Depends(read_json_body),
    db: Session = Depends(get_db)
):
    """Assign one order to a store and mark it assigned"""
    payload, error = parse_payload(AssignOrderRequest, body)
    if error:
        return error
    if not payload.order_id or not payload.store_id:
        return error_response(status.HTTP_400_BAD_REQUEST, "Order ID and Store ID are required")

    logger.info(f"Assigning order {payload.order_id} to store {payload.store_id}")
    try:
        if not store_crud.get_store(db, payload.store_id):
            return error_response(status.HTTP_404_NOT_FOUND, "Store not found")

        db_order = order_crud.assign_order(db, payload.order_id, payload.store_id)
        if not db_order:
            return error_response(status.HTTP_404_NOT_FOUND, "Order not found")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Assignment error: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    logger.info(f"Order {db_order.id} assigned successfully")
    return {
        "success": True,
        "message": "Order assigned successfully",
        "data": [OrderRead.model_validate(db_order).model_dump(mode="json")],
    }

@router.post("/auto-assign-orders")
def auto_assign_orders(db: Session = Depends(get_db)):
    """Match every pending order to a store by main store name"""
    logger.info("Auto-assign called")
    try:
        result = order_crud.auto_assign_pending_orders(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error in auto-assign: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    return result.model_dump()

@router.post("/get-order")
def get_order(
    body: Any = Depends(read_json_body),
    db: Session = Depends(get_db)
):
    """Fetch one order with its items and assigned store"""
    payload, error = parse_payload(GetOrderRequest, body)
    if error:
        return error
    if not payload.order_id:
        return error_response(status.HTTP_400_BAD_REQUEST, "Order ID is required")

    try:
        db_order = order_crud.get_order(db, payload.order_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error fetching order {payload.order_id}: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch order details")

    if not db_order:
        return error_response(status.HTTP_404_NOT_FOUND, "Order not found")

    return {
        "success": True,
        "order": OrderDetail.model_validate(db_order).model_dump(mode="json"),
    }

# --- Periodic auto-assignment ---

_runner_thread: Optional[threading.Thread] = None
_runner_stop = threading.Event()

def run_auto_assign_once(db_session_factory):
    """Run one auto-assignment pass with a dedicated session."""
    session = db_session_factory()
    try:
        return order_crud.auto_assign_pending_orders(session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Scheduled auto-assign failed: {e}")
        return None
    finally:
        session.close()

def start_auto_assign_runner(db_session_factory, interval: float = AUTO_ASSIGN_INTERVAL_SECONDS):
    """Start a background thread that runs auto-assignment every `interval` seconds."""
    global _runner_thread
    if interval <= 0:
        logger.info("Periodic auto-assignment disabled")
        return
    if _runner_thread and _runner_thread.is_alive():
        logger.info("Periodic auto-assignment already running")
        return

    def polling_loop():
        logger.info(f"Periodic auto-assignment started, every {interval}s")
        while not _runner_stop.wait(interval):
            run_auto_assign_once(db_session_factory)
        logger.info("Periodic auto-assignment stopped")

    _runner_stop.clear()
    _runner_thread = threading.Thread(target=polling_loop, daemon=True)
    _runner_thread.start()

def stop_auto_assign_runner(timeout: float = 5.0):
    global _runner_thread
    _runner_stop.set()
    if _runner_thread:
        _runner_thread.join(timeout)
        _runner_thread = None
