from django.urls import path

from .consumers import DashboardConsumer

websocket_urlpatterns = [
    path("ws/orders/admin/", DashboardConsumer.as_asgi()),
]
