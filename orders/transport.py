from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

import socketio
from socketio.exceptions import ConnectionError as PushConnectionError, SocketIOError
from django.conf import settings

logger = logging.getLogger(__name__)

EVENT_CONNECT = "connect"
EVENT_DISCONNECT = "disconnect"
LIFECYCLE_EVENTS = (EVENT_CONNECT, EVENT_DISCONNECT)

# Events published by the orders service
EVENT_NEW_ORDER = "newOrder"
EVENT_ORDER_UPDATED = "orderUpdated"
# Room joins sent to the orders service
EVENT_JOIN_ADMIN = "joinAdmin"
EVENT_JOIN_ORDER_ROOM = "joinOrderRoom"

Handler = Callable[..., Any]


class PushTransport:
    """
    One socket.io connection to the orders service push channel.

    Owned by a single view session (a websocket consumer, a console watcher):
    build it on mount, ``close()`` it on unmount. Consumers subscribe with
    ``on``/``off``; several handlers may listen to the same event.
    Handlers for ``connect``/``disconnect`` are called without arguments after
    ``connected`` has been updated; all other handlers receive the payload.
    """

    def __init__(self, url: str, client: Optional[socketio.AsyncClient] = None, **client_options):
        self.url = url
        self._sio = client if client is not None else socketio.AsyncClient(**client_options)
        self._handlers: Dict[str, List[Handler]] = {}
        self._bound: set[str] = set()
        self._connected = False
        for event in LIFECYCLE_EVENTS:
            self._bind(event)

    @classmethod
    def from_settings(cls) -> "PushTransport":
        return cls(settings.PUSH_URL, reconnection=True, logger=False, engineio_logger=False)

    @property
    def connected(self) -> bool:
        return self._connected

    def on(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)
        self._bind(event)

    def off(self, event: str, handler: Optional[Handler] = None) -> None:
        if handler is None:
            self._handlers.pop(event, None)
            return
        handlers = self._handlers.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    async def emit(self, event: str, data: Any = None) -> bool:
        if not self._connected:
            logger.info("Push channel offline, dropping %s", event)
            return False
        try:
            await self._sio.emit(event, data)
        except SocketIOError as exc:
            logger.warning("Could not publish %s on push channel: %s", event, exc)
            return False
        return True

    async def connect(self) -> bool:
        if self._sio.connected:
            return True
        try:
            await self._sio.connect(self.url)
        except PushConnectionError as exc:
            # No live updates; the page shows the indicator, nothing else.
            logger.warning("Push channel unavailable at %s: %s", self.url, exc)
            return False
        logger.info("Connected to push channel %s", self.url)
        return True

    async def close(self) -> None:
        try:
            if self._sio.connected:
                await self._sio.disconnect()
        finally:
            self._connected = False
            self._handlers.clear()

    async def __aenter__(self) -> "PushTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # internals

    def _bind(self, event: str) -> None:
        if event in self._bound:
            return
        self._sio.on(event, self._dispatcher(event))
        self._bound.add(event)

    def _dispatcher(self, event: str):
        async def dispatch(*args):
            if event == EVENT_CONNECT:
                self._connected = True
            elif event == EVENT_DISCONNECT:
                self._connected = False
                logger.info("Disconnected from push channel %s", self.url)
            await self._deliver(event, args)

        return dispatch

    async def _deliver(self, event: str, args: tuple) -> None:
        for handler in list(self._handlers.get(event, ())):
            try:
                if event in LIFECYCLE_EVENTS:
                    result = handler()
                else:
                    result = handler(args[0] if args else None)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Push handler for %s failed", event)
