# sales/services/reports.py

"""
SALES SUMMARY

Read-only aggregation over settled bills (completed + reprinted; a reprint
is the same sale printed twice, not a second sale).

- Breakdown buckets: day, week (starting Monday) or month.
- Comparison against the previous period of the same length, ending the day
  before `date_from`. Growth is a percentage and reads 0.00 when the previous
  period had nothing to compare against.

Day boundaries use the server's local timezone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate, TruncMonth, TruncWeek
from django.utils import timezone

from sales.models import Bill

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

PERIOD_DAY = "day"
PERIOD_WEEK = "week"
PERIOD_MONTH = "month"

PERIOD_TRUNCATORS = {
    PERIOD_DAY: TruncDate,
    PERIOD_WEEK: TruncWeek,
    PERIOD_MONTH: TruncMonth,
}


def _money(x) -> str:
    """
    JSON-safe money string.
    """
    if x is None:
        return "0.00"
    return str(Decimal(str(x)).quantize(TWOPLACES, rounding=ROUND_HALF_UP))


def _day_bounds(d: date):
    """
    Timezone-aware [start, end) for a local date.
    """
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(d, time.min), tz)
    return start, start + timedelta(days=1)


def _as_date(value) -> date:
    # TruncWeek / TruncMonth on a DateTimeField yield local datetimes
    return value.date() if isinstance(value, datetime) else value


def settled_bills(*, date_from: date, date_to: date):
    start, _ = _day_bounds(date_from)
    _, end = _day_bounds(date_to)
    return Bill.objects.filter(
        status__in=Bill.SETTLED_STATUSES,
        created_at__gte=start,
        created_at__lt=end,
    )


def previous_range(*, date_from: date, date_to: date) -> tuple[date, date]:
    span = (date_to - date_from).days
    prev_to = date_from - timedelta(days=1)
    return prev_to - timedelta(days=span), prev_to


def _headline(qs) -> dict:
    agg = qs.aggregate(bill_count=Count("id"), revenue=Sum("total"))
    bill_count = agg.get("bill_count") or 0
    revenue = agg.get("revenue") or ZERO
    average = (revenue / bill_count) if bill_count else ZERO
    return {"bill_count": bill_count, "revenue": revenue, "average_bill": average}


def _growth(current, previous) -> str:
    current = Decimal(str(current))
    previous = Decimal(str(previous))
    if previous <= 0:
        return "0.00"
    return _money((current - previous) / previous * 100)


def _breakdown(qs, period: str) -> list[dict]:
    trunc = PERIOD_TRUNCATORS[period]
    tz = timezone.get_current_timezone()
    return [
        {
            "start": _as_date(row["bucket"]).isoformat(),
            "bill_count": row["bill_count"],
            "revenue": _money(row["revenue"]),
        }
        for row in qs.annotate(bucket=trunc("created_at", tzinfo=tz))
        .values("bucket")
        .annotate(bill_count=Count("id"), revenue=Sum("total"))
        .order_by("bucket")
    ]


def sales_summary(*, date_from: date, date_to: date, period: str = PERIOD_DAY) -> dict:
    if date_to < date_from:
        raise ValueError("date_to cannot be before date_from")
    if period not in PERIOD_TRUNCATORS:
        raise ValueError(f"Unknown period '{period}'")

    qs = settled_bills(date_from=date_from, date_to=date_to)

    agg = qs.aggregate(
        subtotal=Sum("subtotal"),
        discount=Sum("discount_amount"),
    )
    current = _headline(qs)

    per_day = [
        {
            "date": row["start"],
            "bill_count": row["bill_count"],
            "revenue": row["revenue"],
        }
        for row in _breakdown(qs, PERIOD_DAY)
    ]

    per_cashier = [
        {
            "user_id": str(row["created_by__id"]) if row["created_by__id"] else None,
            "cashier": (row["created_by__name"] or "").strip()
            or row["created_by__email"]
            or "Unknown",
            "bill_count": row["bill_count"],
            "revenue": _money(row["revenue"]),
        }
        for row in qs.values("created_by__id", "created_by__email", "created_by__name")
        .annotate(bill_count=Count("id"), revenue=Sum("total"))
        .order_by("-revenue")
    ]

    prev_from, prev_to = previous_range(date_from=date_from, date_to=date_to)
    previous = _headline(settled_bills(date_from=prev_from, date_to=prev_to))

    return {
        "date_from": date_from.isoformat(),
        "date_to": date_to.isoformat(),
        "bill_count": current["bill_count"],
        "subtotal": _money(agg.get("subtotal")),
        "discount": _money(agg.get("discount")),
        "revenue": _money(current["revenue"]),
        "average_bill": _money(current["average_bill"]),
        "per_day": per_day,
        "period": period,
        "breakdown": _breakdown(qs, period),
        "per_cashier": per_cashier,
        "comparison": {
            "date_from": prev_from.isoformat(),
            "date_to": prev_to.isoformat(),
            "bill_count": previous["bill_count"],
            "revenue": _money(previous["revenue"]),
            "average_bill": _money(previous["average_bill"]),
            "revenue_growth": _growth(current["revenue"], previous["revenue"]),
            "bill_count_growth": _growth(current["bill_count"], previous["bill_count"]),
            "average_bill_growth": _growth(
                _money(current["average_bill"]), _money(previous["average_bill"])
            ),
        },
    }
