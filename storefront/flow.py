from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

from orders.exceptions import InvalidTransition, OrderValidationError

logger = logging.getLogger(__name__)

STATE_KEY = "flow_state"
TRACKED_KEY = "tracked_customer"
LAST_ORDER_KEY = "last_order_customer"

COMPOSING = "composing"
SUCCESS = "success"
TRACKING = "tracking"

TRANSITIONS = {
    COMPOSING: {SUCCESS, TRACKING},
    SUCCESS: {TRACKING, COMPOSING},
    TRACKING: set(),
}


class OrderFlow:
    """
    Which screen the customer page shows: the order form, the thank-you
    screen, or order tracking. Stored in the session next to the cart.
    """

    def __init__(self, store: MutableMapping[str, Any]):
        self.store = store

    @property
    def state(self) -> str:
        state = self.store.get(STATE_KEY, COMPOSING)
        return state if state in TRANSITIONS else COMPOSING

    @property
    def tracked_customer(self) -> Optional[str]:
        return self.store.get(TRACKED_KEY) or None

    @property
    def last_order_customer(self) -> Optional[str]:
        return self.store.get(LAST_ORDER_KEY) or None

    def _move(self, target: str) -> None:
        current = self.state
        if target not in TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot go from {current} to {target}")
        logger.debug("Order flow %s -> %s", current, target)
        self.store[STATE_KEY] = target

    def order_placed(self, customer_name: str) -> None:
        self._move(SUCCESS)
        self.store[LAST_ORDER_KEY] = customer_name

    def track(self, customer_name: Optional[str] = None) -> str:
        name = (customer_name or "").strip()
        if not name and self.state == SUCCESS:
            name = self.last_order_customer or ""
        if not name:
            raise OrderValidationError("Please enter your name to track your orders")
        self._move(TRACKING)
        self.store[TRACKED_KEY] = name
        return name

    def compose(self) -> None:
        self._move(COMPOSING)

    def restart(self) -> None:
        """Forget the flow, as reloading the page would."""
        for key in (STATE_KEY, TRACKED_KEY, LAST_ORDER_KEY):
            self.store.pop(key, None)
