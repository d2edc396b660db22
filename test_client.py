"""
Tests for the edge endpoint client and its retry helper
"""

import httpx
import pytest

from order_routing.client import OrderRoutingClient, retry_request

def make_client(handler, max_retries=3):
    return OrderRoutingClient(
        "http://orders.test",
        max_retries=max_retries,
        retry_delay=0,
        transport=httpx.MockTransport(handler),
    )

def test_retries_server_errors_then_succeeds():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503, json={"success": False, "error": "unavailable"})
        return httpx.Response(200, json={"success": True, "assigned_count": 2, "unmatched_count": 0, "error_count": 0})

    with make_client(handler) as client:
        result = client.auto_assign_orders()

    assert len(calls) == 3
    assert result["success"] is True
    assert result["assigned_count"] == 2

def test_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404, json={"success": False, "error": "Order not found"})

    with make_client(handler) as client:
        result = client.get_order(5)

    assert len(calls) == 1
    assert result == {"success": False, "error": "Order not found"}

def test_gives_up_after_max_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, json={"success": False, "error": "boom"})

    with make_client(handler, max_retries=2) as client:
        result = client.assign_order(1, 2)

    assert len(calls) == 2
    assert result == {"success": False, "error": "boom"}

def test_transport_errors_are_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with make_client(handler) as client:
        result = client.auto_assign_orders()

    assert len(calls) == 3
    assert result["success"] is False
    assert result["error"].startswith("Network error")
    assert result["assigned_count"] == 0

def test_missing_ids_fail_without_a_request():
    def handler(request):
        raise AssertionError("no request expected")

    with make_client(handler) as client:
        assert client.assign_order(1, None)["error"] == "Order ID and Store ID are required"
        assert client.assign_order(None, 1)["success"] is False
        assert client.get_order(None)["error"] == "Order ID is required"

def test_sends_camel_case_body():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = request.read()
        return httpx.Response(200, json={"success": True, "message": "ok", "data": []})

    with make_client(handler) as client:
        client.assign_order(3, 4)

    assert seen["path"] == "/assign-order"
    assert b'"orderId"' in seen["body"]
    assert b'"storeId"' in seen["body"]

def test_retry_request_linear_backoff():
    delays = []
    attempts = []

    def flaky():
        attempts.append(1)
        raise httpx.ReadTimeout("timed out")

    with pytest.raises(httpx.ReadTimeout):
        retry_request(flaky, max_retries=3, delay=0.5, sleep=delays.append)

    assert len(attempts) == 3
    assert delays == [0.5, 1.0]

def test_retry_request_raises_permanent_errors_immediately():
    attempts = []

    def broken():
        attempts.append(1)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        retry_request(broken, max_retries=3, delay=0, sleep=lambda _: None)

    assert len(attempts) == 1

def test_against_the_app(client, create_store, create_order):
    store = create_store("Mansour")
    order = create_order("Mansour")

    routing = OrderRoutingClient("http://testserver", retry_delay=0, transport=client._transport)
    try:
        assigned = routing.assign_order(order["id"], store["id"])
        assert assigned["success"] is True
        fetched = routing.get_order(order["id"])
        assert fetched["order"]["store"]["name"] == "Mansour"
        assert routing.assign_order(order["id"], 999)["error"] == "Store not found"
    finally:
        routing.close()

def test_zero_retries_still_sends_one_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"success": True, "order": {"id": 1}})

    with make_client(handler, max_retries=0) as client:
        result = client.get_order(1)

    assert len(calls) == 1
    assert result["success"] is True

def test_retry_request_with_zero_retries_tries_once():
    attempts = []
    delays = []

    def flaky():
        attempts.append(1)
        raise httpx.ReadTimeout("timed out")

    with pytest.raises(httpx.ReadTimeout):
        retry_request(flaky, max_retries=0, delay=1.0, sleep=delays.append)

    assert len(attempts) == 1
    assert delays == []

def test_validation_detail_list_becomes_a_string():
    def handler(request):
        return httpx.Response(422, json={"detail": [{"loc": ["body"], "msg": "Field required"}]})

    with make_client(handler) as client:
        result = client.assign_order(1, 2)

    assert result["success"] is False
    assert isinstance(result["error"], str)
    assert "Field required" in result["error"]
