from orders.api import APIResponse
from socketio.exceptions import ConnectionError as PushConnectionError


class FakeOrdersClient:
    """Stands in for OrdersClient; records calls and returns canned responses."""

    def __init__(self, orders=None):
        self.orders = list(orders or [])
        self.list_response = None
        self.create_response = None
        self.update_response = None
        self.calls = []

    def list_orders(self, customer_name=None):
        self.calls.append(("list", customer_name))
        if self.list_response is not None:
            return self.list_response
        return APIResponse(True, 200, list(self.orders))

    def create_order(self, customer_name, items, total_amount):
        self.calls.append(("create", customer_name, list(items), total_amount))
        if self.create_response is not None:
            return self.create_response
        return APIResponse(True, 201, None)

    def update_status(self, order_id, status):
        self.calls.append(("update", order_id, status))
        if self.update_response is not None:
            return self.update_response
        return APIResponse(True, 200, None)

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeSocketClient:
    """
    In-memory replacement for socketio.AsyncClient.

    ``connect`` fires the registered connect handler the way the real client
    does once the namespace is joined; ``trigger`` simulates a server event.
    """

    def __init__(self, fail=False):
        self.fail = fail
        self.connected = False
        self.handlers = {}
        self.emitted = []
        self.connect_urls = []
        self.disconnects = 0

    def on(self, event, handler):
        self.handlers[event] = handler

    async def connect(self, url):
        self.connect_urls.append(url)
        if self.fail:
            raise PushConnectionError("Connection refused")
        self.connected = True
        await self.trigger("connect")

    async def emit(self, event, data=None):
        self.emitted.append((event, data))

    async def disconnect(self):
        self.disconnects += 1
        self.connected = False
        await self.trigger("disconnect")

    async def trigger(self, event, *args):
        handler = self.handlers.get(event)
        if handler is not None:
            await handler(*args)

    async def drop(self):
        """Server-side disconnect."""
        self.connected = False
        await self.trigger("disconnect")
