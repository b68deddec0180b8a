from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.utils.dateparse import parse_datetime

from .exceptions import InvalidOrderPayload
from .status import progress_percent, progress_steps, status_label, step_index


def _to_decimal(value: Any, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value if value is not None else 0))
    except (InvalidOperation, ValueError):
        raise InvalidOrderPayload(f"{field_name} is not a number: {value!r}")
    if not amount.is_finite():
        raise InvalidOrderPayload(f"{field_name} is not a finite number: {value!r}")
    return amount


@dataclass(frozen=True)
class OrderItem:
    name: str
    price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "OrderItem":
        if not isinstance(data, dict):
            raise InvalidOrderPayload(f"order item must be an object, got {type(data).__name__}")
        try:
            quantity = int(data.get("quantity", 1))
        except (TypeError, ValueError):
            raise InvalidOrderPayload(f"quantity is not an integer: {data.get('quantity')!r}")
        return cls(
            name=str(data.get("name", "")),
            price=_to_decimal(data.get("price"), "price"),
            quantity=quantity,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "price": float(self.price), "quantity": self.quantity}


@dataclass(frozen=True)
class Order:
    """
    One order as the orders service reports it.

    Records are replaced wholesale by collections; nothing mutates them in place.
    ``created_at`` is kept as the raw ISO string the service sent.
    """

    id: str
    customer_name: str
    items: List[OrderItem] = field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")
    created_at: str = ""
    status: str = "pending"
    customer_email: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Order":
        if not isinstance(data, dict):
            raise InvalidOrderPayload(f"order must be an object, got {type(data).__name__}")
        order_id = data.get("id") or data.get("_id")
        if not order_id:
            raise InvalidOrderPayload("order payload has no id")
        customer_name = data.get("customerName")
        if not isinstance(customer_name, str):
            raise InvalidOrderPayload(f"order {order_id} has no customerName")
        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise InvalidOrderPayload(f"order {order_id} items must be a list")
        return cls(
            id=str(order_id),
            customer_name=customer_name,
            items=[OrderItem.from_payload(i) for i in raw_items],
            total_amount=_to_decimal(data.get("totalAmount"), "totalAmount"),
            created_at=str(data.get("createdAt") or ""),
            status=str(data.get("status") or ""),
            customer_email=data.get("customerEmail") or None,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "id": self.id,
            "customerName": self.customer_name,
            "items": [i.to_payload() for i in self.items],
            "totalAmount": float(self.total_amount),
            "createdAt": self.created_at,
            "status": self.status,
        }
        if self.customer_email:
            payload["customerEmail"] = self.customer_email
        return payload

    # display helpers used by templates and websocket frames

    @property
    def short_id(self) -> str:
        return self.id[-6:].upper()

    @property
    def status_label(self) -> str:
        return status_label(self.status)

    @property
    def step_index(self) -> int:
        return step_index(self.status)

    @property
    def progress_percent(self) -> float:
        return progress_percent(self.status)

    @property
    def progress_steps(self):
        return progress_steps(self.status)

    @property
    def created_display(self) -> str:
        try:
            dt = parse_datetime(self.created_at) if self.created_at else None
        except ValueError:
            dt = None
        if dt is None:
            return self.created_at
        return dt.strftime("%Y-%m-%d %H:%M")

    def belongs_to(self, customer_name: str) -> bool:
        return self.customer_name.lower() == (customer_name or "").lower()
