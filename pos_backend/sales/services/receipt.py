# sales/services/receipt.py

"""
RECEIPT RENDERER

Formats a committed Bill as fixed-width plain text for a receipt printer.
Read-only: never writes the bill (reprint status is the lifecycle's job).

The shop header comes from settings.SHOP (injected configuration).
"""

from __future__ import annotations

from django.conf import settings
from django.utils import timezone

from sales.models import Bill

RECEIPT_WIDTH = 40


def _shop() -> dict:
    return getattr(settings, "SHOP", {}) or {}


def _amount(value) -> str:
    symbol = (_shop().get("CURRENCY_SYMBOL") or "").strip()
    text = f"{value:,.2f}"
    return f"{symbol} {text}" if symbol else text


def _row(label: str, value: str, width: int = RECEIPT_WIDTH) -> str:
    gap = max(1, width - len(label) - len(value))
    return f"{label}{' ' * gap}{value}"


def render_receipt_lines(bill: Bill, *, width: int = RECEIPT_WIDTH) -> list[str]:
    shop = _shop()
    rule = "-" * width

    out: list[str] = []

    for key in ("NAME", "ADDRESS", "PHONE"):
        text = (shop.get(key) or "").strip()
        if text:
            out.append(text.center(width).rstrip())

    out.append(rule)
    out.append(_row("Ref:", bill.reference_number, width))
    out.append(
        _row(
            "Date:",
            timezone.localtime(bill.created_at).strftime("%Y-%m-%d %H:%M"),
            width,
        )
    )
    if bill.customer_name:
        out.append(_row("Customer:", bill.customer_name, width))
    if bill.created_by_id and bill.created_by is not None:
        out.append(_row("Cashier:", bill.created_by.display_name, width))
    out.append(rule)

    for line in bill.lines.all().order_by("position"):
        out.append(line.item_name[:width])
        out.append(
            _row(
                f"  {line.quantity} x {line.unit_price:,.2f}",
                _amount(line.line_total),
                width,
            )
        )

    out.append(rule)
    out.append(_row("Subtotal", _amount(bill.subtotal), width))
    if bill.discount_amount:
        label = "Discount"
        if bill.discount_kind == Bill.DISCOUNT_PERCENTAGE:
            label = f"Discount ({bill.discount_value.normalize():f}%)"
        out.append(_row(label, f"-{_amount(bill.discount_amount)}", width))
    out.append(_row("TOTAL", _amount(bill.total), width))
    out.append(_row("Paid", _amount(bill.paid_amount), width))
    out.append(_row("Change", _amount(bill.change_amount), width))
    out.append(rule)

    if bill.status == Bill.STATUS_REPRINTED:
        out.append("** REPRINT **".center(width).rstrip())
    out.append(bill.barcode.center(width).rstrip())
    out.append("Thank you, come again!".center(width).rstrip())

    return out


def render_receipt(bill: Bill, *, width: int = RECEIPT_WIDTH) -> str:
    return "\n".join(render_receipt_lines(bill, width=width)) + "\n"
