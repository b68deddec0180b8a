import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'orderfront.settings')

# Populate the app registry before importing consumers
django_asgi_app = get_asgi_application()

from storefront.routing import websocket_urlpatterns as storefront_ws  # noqa: E402
from dashboard.routing import websocket_urlpatterns as dashboard_ws  # noqa: E402

application = ProtocolTypeRouter({
    'http': django_asgi_app,
    'websocket': AllowedHostsOriginValidator(
        URLRouter(list(storefront_ws) + list(dashboard_ws))
    ),
})
