from __future__ import annotations

import logging

from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from orders.api import get_orders_client
from orders.collections import AdminOrderCollection, fetch_initial_orders
from orders.exceptions import BackendError, InvalidOrderPayload, InvalidStatus
from orders.transport import (
    EVENT_CONNECT,
    EVENT_DISCONNECT,
    EVENT_JOIN_ADMIN,
    EVENT_NEW_ORDER,
    EVENT_ORDER_UPDATED,
    PushTransport,
)
from orders.types import Order

logger = logging.getLogger(__name__)


class DashboardConsumer(AsyncJsonWebsocketConsumer):
    """
    Live admin view of every order.

    Frames sent to the browser:
      {"type": "orders", "filter": ..., "stats": {...}, "orders": [...]}
      {"type": "connection", "connected": bool}
      {"type": "notification", "message": ..., "level": "success"|"info"}
      {"type": "error", "message": ...}

    Frames accepted from the browser:
      {"action": "filter", "status": "all"|<status>}
      {"action": "set_status", "id": <order id>, "status": <status>}
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
        self.client = (self.client_factory or get_orders_client)()
        await self.accept()

        snapshot = await sync_to_async(fetch_initial_orders)(self.client)
        self.collection = AdminOrderCollection(snapshot)
        await self.send_json(self.collection.as_message())

        self.transport = (self.transport_factory or PushTransport.from_settings)()
        try:
            self.transport.on(EVENT_CONNECT, self._on_connect)
            self.transport.on(EVENT_DISCONNECT, self._on_disconnect)
            self.transport.on(EVENT_NEW_ORDER, self._on_new_order)
            self.transport.on(EVENT_ORDER_UPDATED, self._on_order_updated)
            if not await self.transport.connect():
                await self.send_json({"type": "connection", "connected": False})
        except BaseException:
            await self._release()
            raise

    async def disconnect(self, code):
        await self._release()

    async def receive_json(self, content, **kwargs):
        action = content.get("action") if isinstance(content, dict) else None
        if action == "filter":
            try:
                self.collection.set_filter(content.get("status"))
            except InvalidStatus as exc:
                await self._send_error(str(exc))
                return
            await self.send_json(self.collection.as_message())
        elif action == "set_status":
            await self._set_status(str(content.get("id") or ""), content.get("status"))
        else:
            await self._send_error(f"Unknown action: {action!r}")

    async def _set_status(self, order_id: str, status):
        if not order_id:
            await self._send_error("Missing order id")
            return
        try:
            await sync_to_async(self.collection.request_status_change)(self.client, order_id, status)
        except InvalidStatus as exc:
            await self._send_error(str(exc))
        except BackendError as exc:
            logger.error("Error updating order %s status: %s (HTTP %s)", order_id, exc.detail, exc.status)
            await self._send_error(str(exc))

    async def _release(self):
        transport, self.transport = getattr(self, "transport", None), None
        if transport is None:
            return
        transport.off(EVENT_CONNECT, self._on_connect)
        transport.off(EVENT_DISCONNECT, self._on_disconnect)
        transport.off(EVENT_NEW_ORDER, self._on_new_order)
        transport.off(EVENT_ORDER_UPDATED, self._on_order_updated)
        await transport.close()

    async def _send_error(self, message: str):
        await self.send_json({"type": "error", "message": message})

    async def _on_connect(self):
        if self.transport is None:
            return
        await self.transport.emit(EVENT_JOIN_ADMIN)
        await self.send_json({"type": "connection", "connected": True})

    async def _on_disconnect(self):
        await self.send_json({"type": "connection", "connected": False})

    async def _on_new_order(self, payload):
        order = self._decode(payload, EVENT_NEW_ORDER)
        if order is None:
            return
        notification = self.collection.apply_created(order)
        await self._push_state(notification)

    async def _on_order_updated(self, payload):
        order = self._decode(payload, EVENT_ORDER_UPDATED)
        if order is None:
            return
        notification = self.collection.apply_updated(order)
        await self._push_state(notification)

    async def _push_state(self, notification):
        await self.send_json(self.collection.as_message())
        await self.send_json(dict(notification.as_dict(), type="notification"))

    @staticmethod
    def _decode(payload, event):
        try:
            return Order.from_payload(payload)
        except InvalidOrderPayload as exc:
            logger.warning("Ignoring unreadable %s event: %s", event, exc)
            return None
