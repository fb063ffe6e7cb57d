# sales/api/viewsets/bill.py

"""
======================================================
PATH: sales/api/viewsets/bill.py
======================================================
BILL VIEWSET (STAFF)

Purpose:
- Bill history for the till (list + retrieve, filterable).
- Receipt endpoint (structured bill + plain-text rendering).
- Reprint endpoint (completed -> reprinted, owner / manager only).
- Lookup by scanned receipt barcode.

Bills are never created here: the sale committer (POS checkout) is the
only writer.
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from sales.api.filters import BillFilter
from sales.models import Bill
from sales.serializers import BillSerializer
from sales.services.bill_lifecycle import BillLifecycleError, reprint_bill
from sales.services.receipt import render_receipt
from users.permissions import IsOwnerOrManager, IsPOSUser


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


class BillViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = BillSerializer
    permission_classes = [IsAuthenticated, IsPOSUser]
    filterset_class = BillFilter

    def get_queryset(self):
        return (
            Bill.objects.all()
            .select_related("created_by")
            .prefetch_related("lines")
            .order_by("-created_at")
        )

    def get_permissions(self):
        if self.action == "reprint":
            return [IsAuthenticated(), IsOwnerOrManager()]
        return super().get_permissions()

    # ======================================================
    # RECEIPT
    # GET /api/sales/bills/:id/receipt/
    # ======================================================

    @extend_schema(
        responses={200: BillSerializer},
        description="Print-ready receipt: the bill plus its plain-text rendering.",
    )
    @action(detail=True, methods=["get"], url_path="receipt")
    def receipt(self, request, pk=None):
        bill: Bill = self.get_object()
        data = BillSerializer(bill).data
        data["receipt_text"] = render_receipt(bill)
        return Response(data, status=status.HTTP_200_OK)

    # ======================================================
    # REPRINT
    # POST /api/sales/bills/:id/reprint/
    # ======================================================

    @extend_schema(
        request=None,
        responses={
            200: BillSerializer,
            409: OpenApiResponse(description="Bill status does not allow a reprint"),
        },
        description="Mark the bill reprinted and return its receipt.",
    )
    @action(detail=True, methods=["post"], url_path="reprint")
    def reprint(self, request, pk=None):
        bill: Bill = self.get_object()

        try:
            bill = reprint_bill(bill=bill)
        except BillLifecycleError as exc:
            return error_response(
                code="INVALID_TRANSITION",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )

        data = BillSerializer(bill).data
        data["receipt_text"] = render_receipt(bill)
        return Response(data, status=status.HTTP_200_OK)

    # ======================================================
    # LOOKUP BY RECEIPT BARCODE
    # GET /api/sales/bills/by-barcode/<code>/
    # ======================================================

    @extend_schema(
        responses={
            200: BillSerializer,
            404: OpenApiResponse(description="No bill with this barcode"),
        },
    )
    @action(detail=False, methods=["get"], url_path=r"by-barcode/(?P<code>[^/]+)")
    def by_barcode(self, request, code=None):
        bill = self.get_queryset().filter(barcode=(code or "").strip()).first()
        if bill is None:
            return error_response(
                code="NOT_FOUND",
                message="No bill with this barcode",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(BillSerializer(bill).data)
