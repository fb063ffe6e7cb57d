# sales/services/sale_committer.py

"""
SALE COMMITTER (APPLICATION SERVICE)

Purpose:
- Turn a cart snapshot + payment into a completed Bill.
- The ONLY writer of bills and the ONLY decrementer of stock on the sale path.

Steps (one DB transaction, all-or-nothing):
1) lock live stock rows (pk order) and revalidate every line
2) allocate reference_number + barcode
3) insert Bill (status=completed) and its BillLines
4) conditionally decrement stock for each item
5) return the Bill

Hard rules:
- The cart's stock snapshot is advisory; only live rows decide.
- Any failure inside the transaction leaves no Bill, no BillLine and no
  stock change behind.
- Transient database errors (lock timeouts, identifier collisions) are
  retried up to SALE_COMMIT_MAX_ATTEMPTS; business errors never are.
- The caller's cart is not touched here. The caller clears it after success.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from django.db import DatabaseError, IntegrityError, OperationalError, transaction

from inventory.services.stock import (
    current_stock_level,
    decrement_stock_if_available,
    get_live_items,
)
from sales.models import Bill, BillLine
from sales.services.exceptions import (
    EmptyCartError,
    InsufficientPaymentError,
    InsufficientStockError,
    PersistenceFailure,
    StaleItemReferenceError,
)
from sales.services.identifiers import allocate_identifiers

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

TRANSIENT_DB_ERRORS = (OperationalError, IntegrityError)


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _tendered(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0")
    try:
        amount = Decimal(str(v))
    except InvalidOperation as exc:
        raise ValueError(f"paid_amount is not a number: {v!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"paid_amount is not a number: {v!r}")
    return amount


def _max_attempts() -> int:
    return max(1, int(getattr(settings, "SALE_COMMIT_MAX_ATTEMPTS", 3)))


def _aggregate_demand(cart) -> dict[str, dict]:
    """
    Total requested quantity per stock item, in cart order.
    A cart normally holds one line per item, but nothing here relies on it.
    """
    demand: dict[str, dict] = {}
    for line in cart.lines:
        entry = demand.setdefault(line.item_id, {"name": line.name, "quantity": 0})
        entry["quantity"] += int(line.quantity)
    return demand


# ============================================================
# ONE ATTEMPT
# ============================================================


def _revalidate(demand: dict[str, dict]) -> None:
    live = get_live_items(demand.keys(), lock=True)

    for item_id, entry in demand.items():
        item = live.get(item_id)
        if item is None:
            raise StaleItemReferenceError(entry["name"], item_id)

        if item.current_stock < entry["quantity"]:
            raise InsufficientStockError(item.name, item.current_stock, entry["quantity"])


def _commit_once(*, cart, totals, paid: Decimal, user) -> Bill:
    demand = _aggregate_demand(cart)

    with transaction.atomic():
        # 1) revalidate against locked live rows
        _revalidate(demand)

        # 2) identifiers
        reference_number, barcode = allocate_identifiers()

        # 3) bill + lines
        bill = Bill.objects.create(
            reference_number=reference_number,
            barcode=barcode,
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            discount_kind=cart.discount.kind,
            discount_value=_money(cart.discount.value),
            total=totals.total,
            paid_amount=paid,
            change_amount=paid - totals.total,
            customer_name=(cart.customer_name or "").strip(),
            status=Bill.STATUS_COMPLETED,
            created_by=user if getattr(user, "is_authenticated", False) else None,
        )

        for position, line in enumerate(cart.lines):
            BillLine.objects.create(
                bill=bill,
                stock_item_id=line.item_id,
                item_name=line.name,
                quantity=line.quantity,
                unit_price=_money(line.unit_price),
                position=position,
            )

        # 4) conditional decrement (never below zero, even if a row slipped
        #    past the lock, e.g. on backends without SELECT ... FOR UPDATE)
        for item_id, entry in demand.items():
            if not decrement_stock_if_available(item_id=item_id, quantity=entry["quantity"]):
                available = current_stock_level(item_id)
                if available is None:
                    raise StaleItemReferenceError(entry["name"], item_id)
                raise InsufficientStockError(entry["name"], available, entry["quantity"])

    return bill


# ============================================================
# PUBLIC ENTRY POINT
# ============================================================


def commit_sale(*, cart, paid_amount, user=None) -> Bill:
    """
    Commit the cart as a completed Bill.

    Raises:
    - EmptyCartError / InsufficientPaymentError before touching the database
    - StaleItemReferenceError / InsufficientStockError after a full rollback
    - PersistenceFailure when the database refuses the write
    """
    if cart is None or cart.is_empty:
        raise EmptyCartError()

    totals = cart.compute_totals()
    # Compared unrounded: any shortfall, even below a cent, is refused.
    tendered = _tendered(paid_amount)
    if tendered < totals.total:
        raise InsufficientPaymentError(shortfall=totals.total - tendered)

    paid = _money(tendered)

    max_attempts = _max_attempts()
    attempt = 0

    while True:
        attempt += 1
        try:
            bill = _commit_once(cart=cart, totals=totals, paid=paid, user=user)
        except TRANSIENT_DB_ERRORS as exc:
            if attempt < max_attempts:
                logger.warning(
                    "Sale commit hit a transient database error; retrying",
                    extra={"attempt": attempt, "max_attempts": max_attempts, "error": str(exc)},
                )
                continue

            logger.error(
                "Sale commit failed after retries",
                extra={"attempts": attempt, "error": str(exc)},
            )
            raise PersistenceFailure(attempts=attempt) from exc
        except DatabaseError as exc:
            logger.exception("Sale commit failed", extra={"attempts": attempt})
            raise PersistenceFailure(attempts=attempt) from exc

        logger.info(
            "Sale committed",
            extra={
                "bill_id": str(bill.id),
                "reference_number": bill.reference_number,
                "total": str(bill.total),
                "lines": len(cart.lines),
                "attempts": attempt,
            },
        )
        return bill
