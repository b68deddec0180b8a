from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .exceptions import InvalidStatus


STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_PREPARING = "preparing"
STATUS_COMPLETED = "completed"

# Forward-only progression, owned by the external service.
STATUS_ORDER = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_PREPARING, STATUS_COMPLETED)

STATUS_CHOICES = [
    (STATUS_PENDING, "Pending"),
    (STATUS_CONFIRMED, "Confirmed"),
    (STATUS_PREPARING, "Preparing"),
    (STATUS_COMPLETED, "Completed"),
]

FILTER_ALL = "all"
FILTER_CHOICES = [(FILTER_ALL, "All Orders")] + STATUS_CHOICES


@dataclass(frozen=True)
class StatusStep:
    key: str
    label: str
    icon: str


STATUS_STEPS = (
    StatusStep(STATUS_PENDING, "Order Placed", "📝"),
    StatusStep(STATUS_CONFIRMED, "Confirmed", "✅"),
    StatusStep(STATUS_PREPARING, "Preparing", "👨‍🍳"),
    StatusStep(STATUS_COMPLETED, "Ready", "🎉"),
)

STATUS_MESSAGES = {
    STATUS_PENDING: "Your order has been placed!",
    STATUS_CONFIRMED: "Your order has been confirmed!",
    STATUS_PREPARING: "Your order is being prepared!",
    STATUS_COMPLETED: "Your order is ready for pickup!",
}

DEFAULT_ICON = "🔔"


def validate_status(value) -> str:
    status = str(value or "").strip().lower()
    if status not in STATUS_ORDER:
        raise InvalidStatus(f"Unknown order status: {value!r}")
    return status


def validate_filter(value) -> str:
    """Return a normalised filter value; ``None``/blank means ``all``."""
    raw = str(value or FILTER_ALL).strip().lower()
    if raw == FILTER_ALL:
        return FILTER_ALL
    return validate_status(raw)


def status_label(status: str) -> str:
    return dict(STATUS_CHOICES).get(status, str(status).capitalize())


def step_index(status: str) -> int:
    """Zero-based position of *status* in the progression, -1 when unknown."""
    for idx, step in enumerate(STATUS_STEPS):
        if step.key == status:
            return idx
    return -1


def step_icon(status: str) -> str:
    idx = step_index(status)
    return STATUS_STEPS[idx].icon if idx >= 0 else DEFAULT_ICON


def progress_percent(status: str) -> float:
    idx = step_index(status)
    if idx < 0:
        return 0.0
    return round(idx / (len(STATUS_STEPS) - 1) * 100, 1)


def progress_steps(status: str) -> List[Dict[str, object]]:
    current = step_index(status)
    return [
        {
            "key": step.key,
            "label": step.label,
            "icon": step.icon,
            "reached": idx <= current,
            "current": idx == current,
        }
        for idx, step in enumerate(STATUS_STEPS)
    ]
