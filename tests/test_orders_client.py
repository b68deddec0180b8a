import json
from decimal import Decimal
from unittest import mock

import pytest
import requests

from orders.api import OrdersClient, get_orders_client
from tests.factories import order_payload


def _response(status=200, body=None, method="GET", url="http://orders.test/api/orders"):
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp.request = requests.Request(method, url).prepare()
    if body is not None:
        resp._content = json.dumps(body).encode()
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = b""
    return resp


@pytest.fixture
def client():
    return OrdersClient("http://orders.test/")


def test_list_orders_passes_customer_and_parses(client):
    body = [order_payload(id="a1", customer_name="Alice"), {"broken": True}]
    with mock.patch.object(client.session, "request", return_value=_response(body=body)) as req:
        resp = client.list_orders(customer_name="Alice")

    assert resp.ok
    assert [o.id for o in resp.data] == ["a1"]
    args, kwargs = req.call_args
    assert args == ("GET", "http://orders.test/api/orders")
    assert kwargs["params"] == {"customerName": "Alice"}


def test_list_orders_without_filter_sends_no_params(client):
    with mock.patch.object(client.session, "request", return_value=_response(body=[])) as req:
        resp = client.list_orders()
    assert resp.ok and resp.data == []
    assert req.call_args.kwargs["params"] == {}


def test_list_orders_rejects_non_list_body(client):
    with mock.patch.object(client.session, "request", return_value=_response(body={"orders": []})):
        resp = client.list_orders()
    assert not resp.ok


def test_create_order_posts_camel_case_body(client):
    created = order_payload(id="n1", customer_name="Alice")
    with mock.patch.object(client.session, "request", return_value=_response(201, created, "POST")) as req:
        resp = client.create_order("Alice", [{"id": 1, "name": "Pizza", "price": 12.99, "quantity": 1}], Decimal("12.99"))

    assert resp.ok
    assert resp.status == 201
    assert resp.data.id == "n1"
    assert req.call_args.kwargs["json"] == {
        "customerName": "Alice",
        "items": [{"id": 1, "name": "Pizza", "price": 12.99, "quantity": 1}],
        "totalAmount": 12.99,
    }


def test_update_status_patches_single_order(client):
    with mock.patch.object(client.session, "request", return_value=_response(200, order_payload(id="x9"), "PATCH")) as req:
        resp = client.update_status("x9", "confirmed")
    assert resp.ok
    args, kwargs = req.call_args
    assert args == ("PATCH", "http://orders.test/api/orders/x9")
    assert kwargs["json"] == {"status": "confirmed"}


def test_http_error_is_reported_not_raised(client):
    with mock.patch.object(client.session, "request", return_value=_response(404, {"message": "Order not found"}, "PATCH")):
        resp = client.update_status("missing", "confirmed")
    assert not resp.ok
    assert resp.status == 404
    assert "Order not found" in resp.error


def test_network_error_is_reported_not_raised(client):
    with mock.patch.object(client.session, "request", side_effect=requests.ConnectionError("refused")):
        resp = client.list_orders()
    assert not resp.ok
    assert resp.status == 0


def test_unreadable_created_order_still_counts_as_success(client):
    with mock.patch.object(client.session, "request", return_value=_response(201, {"ok": True}, "POST")):
        resp = client.create_order("Alice", [], Decimal("0"))
    assert resp.ok
    assert resp.data is None


def test_client_from_settings(settings):
    settings.BACKEND_URL = "http://orders.internal:3001"
    settings.ORDERS_API_TIMEOUT = 2.5
    client = get_orders_client()
    assert client.base_url == "http://orders.internal:3001"
    assert client.timeout == 2.5
