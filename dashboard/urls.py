# dashboard/urls.py
from django.urls import path
from . import views

app_name = "dashboard"

urlpatterns = [
    path("", views.order_dashboard, name="order_dashboard"),
    path("orders/<str:order_id>/status/", views.order_status_update, name="order_status_update"),
]
