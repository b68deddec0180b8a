# storefront/views.py
from __future__ import annotations

import logging

from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from menu.catalog import MENU_ITEMS, get_item
from orders.api import get_orders_client
from orders.collections import CustomerOrderTracker
from orders.exceptions import BackendError, InvalidTransition, OrderValidationError
from orders.status import STATUS_STEPS

from .composer import OrderComposer
from .flow import COMPOSING, SUCCESS, TRACKING, OrderFlow

logger = logging.getLogger(__name__)


def _is_htmx(request: HttpRequest) -> bool:
    # Treat both HTMX and classic AJAX (XMLHttpRequest) as JSON clients
    if request.headers.get('HX-Request', '').lower() == 'true':
        return True
    xr = request.headers.get('X-Requested-With', '')
    return xr.lower() == 'xmlhttprequest'


def _item_or_404(request: HttpRequest):
    item = get_item(request.POST.get("item_id"))
    if item is None:
        raise Http404("Unknown menu item")
    return item


def _cart_response(request: HttpRequest, composer: OrderComposer) -> HttpResponse:
    if _is_htmx(request):
        return JsonResponse({"ok": True, "cart": composer.summary()})
    return redirect("storefront:order_page")


@require_GET
def order_page(request: HttpRequest) -> HttpResponse:
    flow = OrderFlow(request.session)
    state = flow.state

    if state == SUCCESS:
        return render(request, "storefront/order_success.html", {
            "customer_name": flow.last_order_customer,
        })

    if state == TRACKING:
        tracker = CustomerOrderTracker(flow.tracked_customer or "")
        tracker.load(get_orders_client())
        return render(request, "storefront/order_tracking.html", {
            "tracker": tracker,
            "steps": STATUS_STEPS,
        })

    composer = OrderComposer(request.session)
    return render(request, "storefront/order_form.html", {
        "menu_items": MENU_ITEMS,
        "entries": composer.entries(),
        "total": composer.compute_total(),
        "customer_name": composer.customer_name,
    })


@require_POST
def cart_add(request: HttpRequest) -> HttpResponse:
    item = _item_or_404(request)
    composer = OrderComposer(request.session)
    composer.add_item(item)
    return _cart_response(request, composer)


@require_POST
def cart_update(request: HttpRequest) -> HttpResponse:
    item = _item_or_404(request)
    composer = OrderComposer(request.session)
    composer.set_quantity(item.id, request.POST.get("quantity", ""))
    return _cart_response(request, composer)


@require_POST
def cart_remove(request: HttpRequest) -> HttpResponse:
    item = _item_or_404(request)
    composer = OrderComposer(request.session)
    composer.remove_item(item.id)
    return _cart_response(request, composer)


@require_POST
def checkout(request: HttpRequest) -> HttpResponse:
    flow = OrderFlow(request.session)
    if flow.state != COMPOSING:
        messages.error(request, "Start a new order before placing it")
        return redirect("storefront:order_page")

    composer = OrderComposer(request.session)
    composer.customer_name = request.POST.get("customer_name", composer.customer_name)
    customer_name = composer.customer_name.strip()
    try:
        order = composer.submit(get_orders_client())
    except OrderValidationError as exc:
        messages.error(request, str(exc))
        return redirect("storefront:order_page")
    except BackendError as exc:
        logger.error("Error placing order for %r: %s (HTTP %s)", customer_name, exc.detail, exc.status)
        messages.error(request, str(exc))
        return redirect("storefront:order_page")

    flow.order_placed(customer_name)
    if order is not None:
        logger.info("Order %s placed", order.id)
    return redirect("storefront:order_page")


@require_POST
def track(request: HttpRequest) -> HttpResponse:
    flow = OrderFlow(request.session)
    name = request.POST.get("customer_name", "")
    if not name.strip() and flow.state == COMPOSING:
        name = OrderComposer(request.session).customer_name
    try:
        flow.track(name)
    except (OrderValidationError, InvalidTransition) as exc:
        messages.error(request, str(exc))
    return redirect("storefront:order_page")


@require_POST
def compose(request: HttpRequest) -> HttpResponse:
    flow = OrderFlow(request.session)
    try:
        flow.compose()
    except InvalidTransition as exc:
        messages.error(request, str(exc))
    return redirect("storefront:order_page")


@require_POST
def restart(request: HttpRequest) -> HttpResponse:
    OrderFlow(request.session).restart()
    return redirect("storefront:order_page")
