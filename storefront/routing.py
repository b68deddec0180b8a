from django.urls import path

from .consumers import OrderTrackingConsumer

websocket_urlpatterns = [
    path("ws/orders/track/<path:customer_name>/", OrderTrackingConsumer.as_asgi()),
]
