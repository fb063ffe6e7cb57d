# sales/views/reports.py

"""
PATH: sales/views/reports.py

SALES REPORTS

- Summary over a local-date range: revenue, bill count, average bill,
  per-day and per-cashier breakdowns.
- Settled bills only (completed + reprinted).
- Owner / manager only.
"""

from __future__ import annotations

from datetime import datetime

from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from sales.services.reports import PERIOD_DAY, PERIOD_TRUNCATORS, sales_summary
from users.permissions import IsOwnerOrManager


def _parse_report_date(date_str: str | None, *, default):
    """
    Accepts YYYY-MM-DD. Returns `default` when absent, None when malformed.
    """
    if not date_str:
        return default

    try:
        return datetime.strptime(date_str.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _bad_request(message: str, code: str = "INVALID_DATE_RANGE"):
    return Response(
        {"error": {"code": code, "message": message}},
        status=400,
    )


class SalesSummaryReportView(APIView):
    permission_classes = [IsAuthenticated, IsOwnerOrManager]

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="date_from",
                type=OpenApiTypes.DATE,
                required=False,
                description="First day (YYYY-MM-DD). Defaults to today.",
            ),
            OpenApiParameter(
                name="date_to",
                type=OpenApiTypes.DATE,
                required=False,
                description="Last day, inclusive (YYYY-MM-DD). Defaults to date_from.",
            ),
            OpenApiParameter(
                name="period",
                type=OpenApiTypes.STR,
                required=False,
                enum=list(PERIOD_TRUNCATORS),
                description="Breakdown bucket: day (default), week or month.",
            ),
        ],
        description=(
            "Sales summary with a day / week / month breakdown, per-cashier totals "
            "and a comparison against the previous period of the same length."
        ),
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        today = timezone.localdate()

        date_from = _parse_report_date(request.query_params.get("date_from"), default=today)
        if date_from is None:
            return _bad_request("Invalid date_from. Use YYYY-MM-DD.")

        date_to = _parse_report_date(request.query_params.get("date_to"), default=date_from)
        if date_to is None:
            return _bad_request("Invalid date_to. Use YYYY-MM-DD.")

        if date_to < date_from:
            return _bad_request("date_to cannot be before date_from.")

        period = (request.query_params.get("period") or PERIOD_DAY).strip().lower()
        if period not in PERIOD_TRUNCATORS:
            return _bad_request("Invalid period. Use day, week or month.", code="INVALID_PERIOD")

        return Response(sales_summary(date_from=date_from, date_to=date_to, period=period))
