# orderfront/urls.py
from __future__ import annotations

from django.http import HttpResponse
from django.urls import include, path


def favicon(request):
    return HttpResponse(status=204)


urlpatterns = [
    # Favicon to prevent 404 noise
    path("favicon.ico", favicon, name="favicon"),
    # Customer order form and tracking
    path("", include(("storefront.urls", "storefront"), namespace="storefront")),
    # Admin order dashboard
    path("admin/", include(("dashboard.urls", "dashboard"), namespace="dashboard")),
]
