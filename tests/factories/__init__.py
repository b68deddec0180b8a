from .orders import OrderFactory, OrderItemFactory, order_payload

__all__ = [
    "OrderFactory",
    "OrderItemFactory",
    "order_payload",
]
