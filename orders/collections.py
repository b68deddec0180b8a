"""
Locally held order state kept in step with the orders service push channel.

Both collections follow the same reconciliation rules:
- an ``orderUpdated`` event replaces the order with the same id wholesale;
  an id we do not hold is dropped (no insert on miss);
- replaying the same event is harmless since replacement is idempotent;
- nothing here writes optimistically: a status change request leaves local
  state alone until the confirming push event arrives.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

from .api import OrdersClient
from .exceptions import BackendError
from .status import (
    FILTER_ALL,
    STATUS_MESSAGES,
    STATUS_ORDER,
    step_icon,
    validate_filter,
    validate_status,
)
from .types import Order

logger = logging.getLogger(__name__)

LEVEL_SUCCESS = "success"
LEVEL_INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A transient toast raised by a push event."""

    message: str
    level: str = LEVEL_INFO
    icon: str = ""

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


def order_frame(order: Order) -> Dict[str, object]:
    """Wire form of *order* plus the display fields the live pages render."""
    payload = order.to_payload()
    payload["shortId"] = order.short_id
    payload["statusLabel"] = order.status_label
    payload["createdDisplay"] = order.created_display
    return payload


def replace_by_id(orders: List[Order], updated: Order) -> bool:
    for idx, existing in enumerate(orders):
        if existing.id == updated.id:
            orders[idx] = updated
            return True
    return False


def fetch_initial_orders(client: OrdersClient) -> List[Order]:
    """Snapshot used to seed the admin dashboard; an empty list when unavailable."""
    resp = client.list_orders()
    if not resp.ok:
        logger.error("Error fetching orders for dashboard: %s", resp.error)
        return []
    return list(resp.data)


class AdminOrderCollection:
    """Every order, most recent first, as the admin dashboard sees them."""

    def __init__(self, initial_orders: Iterable[Order] = ()):
        self._orders: List[Order] = list(initial_orders)
        self.status_filter = FILTER_ALL

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    def __len__(self) -> int:
        return len(self._orders)

    def get(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def apply_created(self, order: Order) -> Notification:
        self._orders.insert(0, order)
        return Notification("New order received!", LEVEL_SUCCESS)

    def apply_updated(self, order: Order) -> Notification:
        if not replace_by_id(self._orders, order):
            logger.debug("orderUpdated for unknown order %s ignored", order.id)
        return Notification("Order status updated", LEVEL_INFO)

    def set_filter(self, value) -> str:
        self.status_filter = validate_filter(value)
        return self.status_filter

    def visible(self) -> List[Order]:
        if self.status_filter == FILTER_ALL:
            return list(self._orders)
        return [o for o in self._orders if o.status == self.status_filter]

    def stats(self) -> Dict[str, int]:
        counts = {"total": len(self._orders)}
        for status in STATUS_ORDER:
            counts[status] = sum(1 for o in self._orders if o.status == status)
        return counts

    def request_status_change(self, client: OrdersClient, order_id: str, status) -> None:
        """
        Ask the service to move *order_id* to *status*.

        Local state is deliberately left untouched; the ``orderUpdated`` push
        that follows a successful PATCH is what updates the collection. If that
        event is lost the dashboard keeps showing the old status.
        """
        status = validate_status(status)
        resp = client.update_status(order_id, status)
        if not resp.ok:
            raise BackendError("Failed to update order status", status=resp.status, detail=resp.error)

    def as_message(self) -> Dict[str, object]:
        return {
            "type": "orders",
            "filter": self.status_filter,
            "stats": self.stats(),
            "orders": [order_frame(o) for o in self.visible()],
        }


class CustomerOrderTracker:
    """One customer's orders, with explicit loading/error/empty states."""

    STATE_LOADING = "loading"
    STATE_READY = "ready"
    STATE_EMPTY = "empty"
    STATE_ERROR = "error"

    LOAD_ERROR = "Failed to load your orders. Please try again."

    def __init__(self, customer_name: str):
        self.customer_name = customer_name
        self.state = self.STATE_LOADING
        self.error: Optional[str] = None
        self._orders: List[Order] = []

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    @property
    def room(self) -> str:
        return self.customer_name.lower()

    def matches(self, order: Order) -> bool:
        return order.belongs_to(self.customer_name)

    def load(self, client: OrdersClient) -> str:
        self.state = self.STATE_LOADING
        self.error = None
        resp = client.list_orders(customer_name=self.customer_name)
        if not resp.ok:
            logger.error("Error fetching orders for %r: %s", self.customer_name, resp.error)
            self.state = self.STATE_ERROR
            self.error = self.LOAD_ERROR
            return self.state
        # The service may ignore the query parameter, so filter here as well.
        self._orders = [o for o in resp.data if self.matches(o)]
        self.state = self.STATE_READY if self._orders else self.STATE_EMPTY
        return self.state

    def apply_updated(self, order: Order) -> Optional[Notification]:
        if not self.matches(order):
            return None
        replace_by_id(self._orders, order)
        message = STATUS_MESSAGES.get(order.status, "Your order was updated")
        return Notification(message, LEVEL_SUCCESS, step_icon(order.status))

    def as_message(self) -> Dict[str, object]:
        orders = []
        for order in self._orders:
            payload = order_frame(order)
            payload["progress"] = order.progress_percent
            payload["steps"] = order.progress_steps
            orders.append(payload)
        return {
            "type": "tracking",
            "state": self.state,
            "customer": self.customer_name,
            "error": self.error,
            "orders": orders,
        }
