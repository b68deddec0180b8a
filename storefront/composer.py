# storefront/composer.py
"""
Session-backed cart for the customer order form.

The cart lives under ``cart`` in the Django session as a list of
``{"id": <catalog id>, "quantity": <int>}`` entries; the name typed into the
form lives under ``customer_name``. Any mutable mapping works as the store,
which keeps the composer usable outside a request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, MutableMapping, Optional

from menu.catalog import CatalogItem, get_item
from orders.api import OrdersClient
from orders.exceptions import BackendError, OrderValidationError
from orders.types import Order

logger = logging.getLogger(__name__)

CART_KEY = "cart"
NAME_KEY = "customer_name"

MISSING_INPUT = "Please fill in your name and select at least one item"
SUBMIT_FAILED = "Failed to place order. Please try again."


@dataclass(frozen=True)
class CartEntry:
    item: CatalogItem
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.item.price * self.quantity

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.item.id,
            "name": self.item.name,
            "price": float(self.item.price),
            "quantity": self.quantity,
        }


def parse_quantity(value: Any) -> Optional[int]:
    """
    Parse a quantity typed into the form.

    Line items hold whole quantities, so a positive fractional value is
    rounded half-up to the nearest whole number, and never below 1.

    Returns:
        The quantity as an int, or None when the value is not a number or
        not positive (blank, text, NaN, infinity, zero, negative).
    """
    if isinstance(value, bool):
        return None
    try:
        qty = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not qty.is_finite() or qty <= 0:
        return None
    return max(1, int(qty.to_integral_value(rounding=ROUND_HALF_UP)))


class OrderComposer:
    def __init__(self, store: MutableMapping[str, Any]):
        self.store = store
        self.is_submitting = False

    # state

    def _lines(self) -> List[Dict[str, int]]:
        lines = self.store.get(CART_KEY, [])
        if not isinstance(lines, list):
            return []
        return [dict(line) for line in lines if isinstance(line, dict)]

    def _save(self, lines: List[Dict[str, int]]) -> None:
        # Always reassign so the session notices the change.
        self.store[CART_KEY] = lines

    @property
    def customer_name(self) -> str:
        return self.store.get(NAME_KEY, "") or ""

    @customer_name.setter
    def customer_name(self, value: str) -> None:
        self.store[NAME_KEY] = value or ""

    def entries(self) -> List[CartEntry]:
        entries = []
        for line in self._lines():
            item = get_item(line.get("id"))
            if item is None:
                logger.warning("Dropping cart line for unknown menu item %r", line.get("id"))
                continue
            entries.append(CartEntry(item=item, quantity=int(line.get("quantity", 1))))
        return entries

    def quantity_of(self, item_id: int) -> int:
        for line in self._lines():
            if line.get("id") == item_id:
                return int(line.get("quantity", 0))
        return 0

    @property
    def is_empty(self) -> bool:
        return not self.entries()

    def compute_total(self) -> Decimal:
        return sum((entry.line_total for entry in self.entries()), Decimal("0.00"))

    # operations

    def add_item(self, item: CatalogItem) -> int:
        """Add one of *item*; returns the resulting quantity."""
        lines = self._lines()
        for line in lines:
            if line.get("id") == item.id:
                line["quantity"] = int(line.get("quantity", 0)) + 1
                self._save(lines)
                return line["quantity"]
        lines.append({"id": item.id, "quantity": 1})
        self._save(lines)
        return 1

    def set_quantity(self, item_id: int, value: Any) -> int:
        """
        Set the quantity of *item_id* exactly.

        An invalid or non-positive value removes the line instead of raising.

        Returns:
            The new quantity, 0 if the line was removed or is not in the cart.
        """
        qty = parse_quantity(value)
        if qty is None:
            self.remove_item(item_id)
            return 0
        lines = self._lines()
        for line in lines:
            if line.get("id") == item_id:
                line["quantity"] = qty
                self._save(lines)
                return qty
        return 0

    def remove_item(self, item_id: int) -> None:
        lines = self._lines()
        remaining = [line for line in lines if line.get("id") != item_id]
        if len(remaining) != len(lines):
            self._save(remaining)

    def clear(self) -> None:
        self._save([])
        self.customer_name = ""

    def submit(self, client: OrdersClient) -> Optional[Order]:
        """
        Send the cart to the orders service.

        Returns:
            The created order as reported by the service (None when its body
            could not be read).

        Raises:
            OrderValidationError: blank name, empty cart, or a submission already
                in flight. No request is made.
            BackendError: the service rejected the order or was unreachable. The
                cart and name are left as they were so the user can retry.
        """
        if self.is_submitting:
            raise OrderValidationError("Your order is already being placed")
        name = self.customer_name.strip()
        entries = self.entries()
        if not name or not entries:
            raise OrderValidationError(MISSING_INPUT)

        self.is_submitting = True
        try:
            resp = client.create_order(
                customer_name=name,
                items=[entry.to_payload() for entry in entries],
                total_amount=self.compute_total(),
            )
        finally:
            self.is_submitting = False

        if not resp.ok:
            raise BackendError(SUBMIT_FAILED, status=resp.status, detail=resp.error)

        logger.info("Order placed for %r (%d lines)", name, len(entries))
        self.clear()
        return resp.data

    def summary(self) -> Dict[str, Any]:
        entries = self.entries()
        return {
            "items": [
                dict(entry.to_payload(), line_total=float(entry.line_total)) for entry in entries
            ],
            "count": sum(entry.quantity for entry in entries),
            "total": float(self.compute_total()),
        }
