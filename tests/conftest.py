import os
import pytest

from orders.transport import PushTransport
from tests.fakes import FakeOrdersClient, FakeSocketClient


# Ensure development-like environment during tests if not provided externally
os.environ.setdefault("ENVIRONMENT", "development")


@pytest.fixture
def orders_client():
    """Canned orders service; inspect ``.calls`` for what was sent."""
    return FakeOrdersClient()


@pytest.fixture
def socket_client():
    return FakeSocketClient()


@pytest.fixture
def transport(socket_client):
    return PushTransport("http://orders.test", client=socket_client)
