from pathlib import Path

import pytest
from django.contrib.staticfiles import finders
from django.urls import reverse

from orders.api import APIResponse
from tests.factories import OrderFactory


@pytest.fixture
def backend(monkeypatch, orders_client):
    monkeypatch.setattr("dashboard.views.get_orders_client", lambda: orders_client)
    orders_client.orders = [
        OrderFactory(id="o1", customer_name="Alice", status="pending"),
        OrderFactory(id="o2", customer_name="Bob", status="preparing", customer_email="bob@example.com"),
        OrderFactory(id="o3", customer_name="Carol", status="completed"),
    ]
    return orders_client


def test_dashboard_lists_all_orders_with_stats(client, backend):
    response = client.get(reverse("dashboard:order_dashboard"))
    assert response.status_code == 200
    assert [o.id for o in response.context["orders"]] == ["o1", "o2", "o3"]
    assert response.context["stats"] == {
        "total": 3, "pending": 1, "confirmed": 0, "preparing": 1, "completed": 1,
    }
    assert b"bob@example.com" in response.content
    assert backend.calls == [("list", None)]


def test_dashboard_filter(client, backend):
    response = client.get(reverse("dashboard:order_dashboard"), {"status": "preparing"})
    assert [o.id for o in response.context["orders"]] == ["o2"]
    assert response.context["status_filter"] == "preparing"
    assert response.context["stats"]["total"] == 3


def test_dashboard_filter_with_no_matches(client, backend):
    response = client.get(reverse("dashboard:order_dashboard"), {"status": "confirmed"})
    assert b"No confirmed orders" in response.content


def test_dashboard_rejects_unknown_filter(client, backend):
    response = client.get(reverse("dashboard:order_dashboard"), {"status": "shipped"})
    assert response.status_code == 400


def test_dashboard_survives_service_outage(client, backend):
    backend.list_response = APIResponse(False, 0, None, error="refused")
    response = client.get(reverse("dashboard:order_dashboard"))
    assert response.status_code == 200
    assert b"No orders have been placed yet" in response.content


def test_status_update_patches_and_keeps_filter(client, backend):
    url = reverse("dashboard:order_status_update", args=["o1"])
    response = client.post(url, {"status": "confirmed", "filter": "pending"})
    assert response.status_code == 302
    assert response["Location"] == "/admin/?status=pending"
    assert ("update", "o1", "confirmed") in backend.calls


def test_status_update_failure_is_reported(client, backend):
    backend.update_response = APIResponse(False, 500, None, error="boom")
    url = reverse("dashboard:order_status_update", args=["o1"])
    response = client.post(url, {"status": "completed"}, follow=True)
    assert "Failed to update order status" in [str(m) for m in response.context["messages"]]


def test_status_update_rejects_unknown_status(client, backend):
    url = reverse("dashboard:order_status_update", args=["o1"])
    response = client.post(url, {"status": "eaten"})
    assert response.status_code == 400
    assert backend.calls_named("update") == []


def test_status_update_ignores_bad_filter_on_redirect(client, backend):
    url = reverse("dashboard:order_status_update", args=["o1"])
    response = client.post(url, {"status": "confirmed", "filter": "<script>"})
    assert response["Location"] == "/admin/"


def test_dashboard_page_carries_live_hooks_and_labels(client, backend):
    response = client.get(reverse("dashboard:order_dashboard"))
    content = response.content.decode()
    assert 'data-online-label="Connected - Real-time updates active"' in content
    assert 'data-offline-label="Disconnected - Trying to reconnect..."' in content
    assert 'data-status-form="o1"' in content
    assert 'data-filter="completed"' in content
    assert "data-orders" in content
    # Status changes are not submitted on change; the script sends them over the socket
    assert "this.form.submit()" not in content


def test_live_script_sends_actions_and_never_reloads():
    source = Path(finders.find("core/live.js")).read_text()
    assert "location.reload" not in source
    assert 'action: "set_status"' in source
    assert 'action: "filter"' in source
    assert "onlineLabel" in source and "offlineLabel" in source
