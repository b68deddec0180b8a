from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

import requests
from django.conf import settings

from core.middleware.request_id import get_request_id

from .exceptions import InvalidOrderPayload
from .types import Order

logger = logging.getLogger(__name__)


@dataclass
class APIResponse:
    ok: bool
    status: int
    data: Any
    error: Optional[str] = None


class BaseClient:
    """
    Thin JSON-over-HTTP client. Never raises for transport or HTTP failures:
    they are logged and reported as ``APIResponse(ok=False)``.
    """

    def __init__(self, base_url: str, headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(headers or {})

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> APIResponse:
        url = self._url(path)
        headers = kwargs.pop("headers", None) or {}
        request_id = get_request_id()
        if request_id:
            headers.setdefault("X-Request-ID", request_id)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, headers=headers, **kwargs)
            resp.raise_for_status()
            try:
                data = resp.json()
            except ValueError:
                data = resp.text
            return APIResponse(True, resp.status_code, data)
        except requests.HTTPError as e:
            r = e.response
            payload = None
            if r is not None:
                try:
                    payload = r.json()
                except ValueError:
                    payload = r.text
            logger.exception("HTTP error calling %s %s: %s", method, url, payload)
            return APIResponse(False, r.status_code if r is not None else 0, None, error=str(payload))
        except requests.RequestException as e:
            logger.exception("Network error calling %s %s: %s", method, url, e)
            return APIResponse(False, 0, None, error=str(e))


class OrdersClient(BaseClient):
    """Client for the external ``/api/orders`` resource."""

    def __init__(self, base_url: str, timeout: Optional[float] = None):
        super().__init__(
            base_url=base_url,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=timeout,
        )

    def list_orders(self, customer_name: Optional[str] = None) -> APIResponse:
        params = {}
        if customer_name:
            params["customerName"] = customer_name
        resp = self._request("GET", "/api/orders", params=params)
        if not resp.ok:
            return resp
        if not isinstance(resp.data, list):
            logger.error("GET /api/orders returned %s instead of a list", type(resp.data).__name__)
            return APIResponse(False, resp.status, None, error="unexpected response body")
        orders = []
        for raw in resp.data:
            try:
                orders.append(Order.from_payload(raw))
            except InvalidOrderPayload as exc:
                logger.warning("Skipping malformed order in listing: %s", exc)
        resp.data = orders
        return resp

    def create_order(self, customer_name: str, items: Iterable[Dict[str, Any]], total_amount: Decimal) -> APIResponse:
        body = {
            "customerName": customer_name,
            "items": list(items),
            "totalAmount": float(total_amount),
        }
        resp = self._request("POST", "/api/orders", json=body)
        if resp.ok:
            resp.data = self._order_or_none(resp.data)
        return resp

    def update_status(self, order_id: str, status: str) -> APIResponse:
        resp = self._request("PATCH", f"/api/orders/{order_id}", json={"status": status})
        if resp.ok:
            resp.data = self._order_or_none(resp.data)
        return resp

    @staticmethod
    def _order_or_none(data: Any) -> Optional[Order]:
        # The request already succeeded; a body we cannot read does not undo that.
        try:
            return Order.from_payload(data)
        except InvalidOrderPayload as exc:
            logger.warning("Orders service returned an unreadable order: %s", exc)
            return None


def get_orders_client() -> OrdersClient:
    return OrdersClient(settings.BACKEND_URL, timeout=settings.ORDERS_API_TIMEOUT)
