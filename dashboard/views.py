# dashboard/views.py
from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.contrib import messages
from django.http import HttpRequest, HttpResponse, HttpResponseBadRequest
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from orders.api import get_orders_client
from orders.collections import AdminOrderCollection, fetch_initial_orders
from orders.exceptions import BackendError, InvalidStatus
from orders.status import FILTER_ALL, FILTER_CHOICES, STATUS_CHOICES

logger = logging.getLogger(__name__)


def _dashboard_url(status_filter: str) -> str:
    url = reverse("dashboard:order_dashboard")
    if status_filter in dict(FILTER_CHOICES) and status_filter != FILTER_ALL:
        url = f"{url}?{urlencode({'status': status_filter})}"
    return url


@require_GET
def order_dashboard(request: HttpRequest) -> HttpResponse:
    collection = AdminOrderCollection(fetch_initial_orders(get_orders_client()))
    try:
        collection.set_filter(request.GET.get("status"))
    except InvalidStatus as exc:
        return HttpResponseBadRequest(str(exc))
    return render(request, "dashboard/order_dashboard.html", {
        "orders": collection.visible(),
        "stats": collection.stats(),
        "status_filter": collection.status_filter,
        "filter_choices": FILTER_CHOICES,
        "status_choices": STATUS_CHOICES,
    })


@require_POST
def order_status_update(request: HttpRequest, order_id: str) -> HttpResponse:
    """
    Ask the orders service to change one order's status.

    Fallback for browsers without JavaScript. The live dashboard sends
    ``{"action": "set_status"}`` over its socket instead and repaints only
    when the service broadcasts ``orderUpdated``; here the PATCH response is
    ignored and the redirect's fresh fetch is what shows the change.
    """
    status_filter = request.POST.get("filter", FILTER_ALL)
    try:
        AdminOrderCollection().request_status_change(
            get_orders_client(), order_id, request.POST.get("status")
        )
    except InvalidStatus as exc:
        return HttpResponseBadRequest(str(exc))
    except BackendError as exc:
        logger.error("Error updating order %s status: %s (HTTP %s)", order_id, exc.detail, exc.status)
        messages.error(request, str(exc))
    return redirect(_dashboard_url(status_filter))
