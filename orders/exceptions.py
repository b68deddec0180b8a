from __future__ import annotations

from typing import Optional


class OrderFrontError(Exception):
    """Base class for errors surfaced to the user by the order views."""


class OrderValidationError(OrderFrontError):
    """Input rejected before any network call (empty name, empty cart...)."""


class BackendError(OrderFrontError):
    """The orders service answered non-2xx or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.detail = detail


class InvalidOrderPayload(OrderFrontError, ValueError):
    """An order record from the service could not be decoded."""


class InvalidStatus(OrderFrontError, ValueError):
    pass


class InvalidTransition(OrderFrontError):
    """Requested a composer/tracking view change the flow does not allow."""
