# inventory/urls.py

"""
INVENTORY URLS

Registers stock item routes under /api/inventory/:
    /stock-items/
    /stock-items/low-stock/
    /stock-items/by-barcode/<code>/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.views import StockItemViewSet

router = DefaultRouter()
router.register(r"stock-items", StockItemViewSet, basename="stock-items")

urlpatterns = [
    path("", include(router.urls)),
]
