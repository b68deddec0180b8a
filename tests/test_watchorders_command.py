from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from orders.api import APIResponse
from orders.transport import PushTransport
from tests.factories import OrderFactory
from tests.fakes import FakeSocketClient


@pytest.fixture
def backend(monkeypatch, orders_client):
    monkeypatch.setattr("dashboard.management.commands.watchorders.get_orders_client", lambda: orders_client)
    orders_client.orders = [
        OrderFactory(id="64f0aa0000a1", customer_name="Alice", status="pending"),
        OrderFactory(id="64f0aa0000b2", customer_name="Bob", status="completed"),
    ]
    return orders_client


def test_snapshot_only_prints_stats_and_orders(backend):
    out = StringIO()
    call_command("watchorders", "--snapshot-only", stdout=out)
    text = out.getvalue()
    assert "Total 2 | pending 1 | confirmed 0 | preparing 0 | completed 1" in text
    assert "#0000A1" in text
    assert "#0000B2" in text


def test_snapshot_respects_status_filter(backend):
    out = StringIO()
    call_command("watchorders", "--snapshot-only", "--status", "completed", stdout=out)
    text = out.getvalue()
    assert "Bob" in text
    assert "Alice" not in text.split("\n", 1)[1]


def test_snapshot_with_service_down(backend):
    backend.list_response = APIResponse(False, 0, None, error="refused")
    out = StringIO()
    call_command("watchorders", "--snapshot-only", stdout=out)
    assert "No orders found" in out.getvalue()


def test_watch_fails_when_push_channel_unreachable(backend, monkeypatch):
    monkeypatch.setattr(
        PushTransport, "from_settings",
        classmethod(lambda cls: cls("http://orders.test", client=FakeSocketClient(fail=True))),
    )
    with pytest.raises(CommandError):
        call_command("watchorders", stdout=StringIO())
