# sales/api/urls.py

"""
SALES API URLS

Provides:
- Bill history:
    /api/sales/bills/
    /api/sales/bills/<uuid>/
    /api/sales/bills/<uuid>/receipt/
    /api/sales/bills/<uuid>/reprint/
    /api/sales/bills/by-barcode/<code>/

- Reports (owner / manager):
    GET /api/sales/reports/summary/?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD

Bills are created only by POS checkout (/api/pos/checkout/).
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.viewsets.bill import BillViewSet
from sales.views.reports import SalesSummaryReportView

router = DefaultRouter()
router.register(r"bills", BillViewSet, basename="bills")

urlpatterns = [
    path("reports/summary/", SalesSummaryReportView.as_view(), name="sales-reports-summary"),
    path("", include(router.urls)),
]
