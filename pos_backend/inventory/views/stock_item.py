# inventory/views/stock_item.py

"""
STOCK ITEM VIEWSET

Purpose:
- Inventory management (CRUD) for owner / manager
- Catalog browsing for every till user (search, in-stock filter)
- Low stock alert list
- Barcode lookup (scanner input on the POS screen)
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.models import StockItem
from inventory.serializers import StockItemSerializer
from inventory.services.stock import find_by_barcode, low_stock_items, search_items
from users.permissions import IsOwnerOrManagerOrReadOnly


class StockItemViewSet(viewsets.ModelViewSet):
    """
    Stock item endpoints.

    Query params (list):
    - q: search name / category / barcode
    - in_stock=1: only items with current_stock > 0
    - category: exact category
    """

    serializer_class = StockItemSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrManagerOrReadOnly]

    def get_queryset(self):
        qs = StockItem.objects.all().order_by("name")

        params = self.request.query_params

        qs = search_items(qs, params.get("q"))

        category = (params.get("category") or "").strip()
        if category:
            qs = qs.filter(category__iexact=category)

        if (params.get("in_stock") or "").strip().lower() in {"1", "true", "yes"}:
            qs = qs.filter(current_stock__gt=0)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter("q", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("in_stock", bool, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("category", str, OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    # --------------------------------------------------
    # LOW STOCK
    # --------------------------------------------------
    @extend_schema(
        responses={200: StockItemSerializer(many=True)},
        description="Items whose current_stock is at or below their low_stock_alert",
    )
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        items = low_stock_items()
        return Response(StockItemSerializer(items, many=True).data)

    # --------------------------------------------------
    # BARCODE LOOKUP
    # --------------------------------------------------
    @extend_schema(
        responses={
            200: StockItemSerializer,
            404: OpenApiResponse(description="No stock item with this barcode"),
        },
        description="Resolve a scanned barcode to a stock item",
    )
    @action(detail=False, methods=["get"], url_path=r"by-barcode/(?P<code>[^/]+)")
    def by_barcode(self, request, code=None):
        item = find_by_barcode(code)
        if item is None:
            return Response(
                {"error": {"code": "NOT_FOUND", "message": "No stock item with this barcode"}},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(StockItemSerializer(item).data)
