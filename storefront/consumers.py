from __future__ import annotations

import logging

from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from orders.api import get_orders_client
from orders.collections import CustomerOrderTracker
from orders.exceptions import InvalidOrderPayload
from orders.transport import (
    EVENT_CONNECT,
    EVENT_DISCONNECT,
    EVENT_JOIN_ORDER_ROOM,
    EVENT_ORDER_UPDATED,
    PushTransport,
)
from orders.types import Order

logger = logging.getLogger(__name__)


class OrderTrackingConsumer(AsyncJsonWebsocketConsumer):
    """
    Live order progress for one customer.

    Frames sent to the browser:
      {"type": "tracking", "state": "loading"|"ready"|"empty"|"error", "orders": [...]}
      {"type": "connection", "connected": bool}
      {"type": "notification", "message": ..., "level": ..., "icon": ...}

    ``transport_factory`` / ``client_factory`` may be passed to ``as_asgi()``.
    """

    transport_factory = None
    client_factory = None

    def __init__(self, *args, transport_factory=None, client_factory=None, **kwargs):
        super().__init__(*args, **kwargs)
        if transport_factory is not None:
            self.transport_factory = transport_factory
        if client_factory is not None:
            self.client_factory = client_factory

    async def connect(self):
        self.transport = None
        # The ASGI server has already percent-decoded the path
        self.customer_name = self.scope["url_route"]["kwargs"]["customer_name"].strip()
        self.tracker = CustomerOrderTracker(self.customer_name)
        await self.accept()
        await self.send_json(self.tracker.as_message())

        client = (self.client_factory or get_orders_client)()
        await sync_to_async(self.tracker.load)(client)
        await self.send_json(self.tracker.as_message())

        self.transport = (self.transport_factory or PushTransport.from_settings)()
        try:
            self.transport.on(EVENT_CONNECT, self._on_connect)
            self.transport.on(EVENT_DISCONNECT, self._on_disconnect)
            self.transport.on(EVENT_ORDER_UPDATED, self._on_order_updated)
            if not await self.transport.connect():
                await self.send_json({"type": "connection", "connected": False})
        except BaseException:
            await self._release()
            raise

    async def disconnect(self, code):
        await self._release()

    async def _release(self):
        transport, self.transport = getattr(self, "transport", None), None
        if transport is None:
            return
        transport.off(EVENT_CONNECT, self._on_connect)
        transport.off(EVENT_DISCONNECT, self._on_disconnect)
        transport.off(EVENT_ORDER_UPDATED, self._on_order_updated)
        await transport.close()

    async def _on_connect(self):
        if self.transport is None:
            return
        await self.transport.emit(EVENT_JOIN_ORDER_ROOM, self.tracker.room)
        await self.send_json({"type": "connection", "connected": True})

    async def _on_disconnect(self):
        await self.send_json({"type": "connection", "connected": False})

    async def _on_order_updated(self, payload):
        try:
            order = Order.from_payload(payload)
        except InvalidOrderPayload as exc:
            logger.warning("Ignoring unreadable orderUpdated event: %s", exc)
            return
        notification = self.tracker.apply_updated(order)
        if notification is None:
            return
        await self.send_json(self.tracker.as_message())
        await self.send_json(dict(notification.as_dict(), type="notification"))
