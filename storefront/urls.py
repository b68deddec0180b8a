# storefront/urls.py
from django.urls import path
from . import views

app_name = "storefront"

urlpatterns = [
    path("", views.order_page, name="order_page"),
    path("cart/add/", views.cart_add, name="cart_add"),
    path("cart/update/", views.cart_update, name="cart_update"),
    path("cart/remove/", views.cart_remove, name="cart_remove"),
    path("checkout/", views.checkout, name="checkout"),
    path("track/", views.track, name="track"),
    path("compose/", views.compose, name="compose"),
    path("restart/", views.restart, name="restart"),
]
