# inventory/services/stock.py

"""
STOCK PRIMITIVES

Purpose:
- Read live stock rows (optionally locked) for revalidation at commit time.
- Decrement stock atomically, only when enough is on hand.
- Catalog helpers used by the POS screens (barcode lookup, low stock, search).

HARD RULES:
- Quantities are integer units.
- current_stock is never written with a value computed in Python.
  The decrement is one conditional UPDATE:
      current_stock = current_stock - q  WHERE id = ? AND current_stock >= q
  so two sessions racing on the same row can never drive it below zero.
"""

from __future__ import annotations

import logging

from django.db.models import F, Q

from inventory.models import StockItem

logger = logging.getLogger(__name__)


def _to_int_qty(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("quantity must be a whole integer unit")
    return value


# ============================================================
# LIVE READS
# ============================================================


def get_live_items(item_ids, *, lock: bool = False) -> dict[str, StockItem]:
    """
    Fetch the live rows for the given ids, keyed by str(id).

    Missing ids are simply absent from the result (the caller decides whether
    that is a stale reference). With lock=True the rows are taken with
    SELECT ... FOR UPDATE in primary-key order, so concurrent committers
    always acquire locks in the same sequence. Must run inside a transaction.
    """
    ids = sorted({str(i) for i in item_ids if i})
    if not ids:
        return {}

    qs = StockItem.objects.filter(pk__in=ids).order_by("pk")
    if lock:
        qs = qs.select_for_update()

    return {str(item.pk): item for item in qs}


def current_stock_level(item_id) -> int | None:
    """
    Re-read one row's on-hand quantity. None when the row no longer exists.
    """
    return (
        StockItem.objects.filter(pk=item_id)
        .values_list("current_stock", flat=True)
        .first()
    )


# ============================================================
# CONDITIONAL DECREMENT
# ============================================================


def decrement_stock_if_available(*, item_id, quantity) -> bool:
    """
    Subtract `quantity` from the item's stock iff at least that much is on hand.

    Returns True when exactly one row was updated, False otherwise
    (row gone, or stock already below `quantity`). Never raises for
    insufficient stock: the sale committer owns that decision.
    """
    qty = _to_int_qty(quantity)
    if qty <= 0:
        raise ValueError("quantity must be greater than zero")

    updated = StockItem.objects.filter(pk=item_id, current_stock__gte=qty).update(
        current_stock=F("current_stock") - qty
    )

    if updated != 1:
        logger.warning(
            "Conditional stock decrement matched no row",
            extra={"stock_item_id": str(item_id), "quantity": qty},
        )
        return False

    return True


# ============================================================
# CATALOG HELPERS
# ============================================================


def find_by_barcode(code: str) -> StockItem | None:
    code = (code or "").strip()
    if not code:
        return None
    return StockItem.objects.filter(barcode=code).first()


def low_stock_items():
    """
    Items at or under their alert threshold, emptiest first.
    """
    return StockItem.objects.filter(current_stock__lte=F("low_stock_alert")).order_by(
        "current_stock", "name"
    )


def search_items(queryset, term: str):
    """
    Case-insensitive match on name, category or barcode.
    """
    term = (term or "").strip()
    if not term:
        return queryset
    return queryset.filter(
        Q(name__icontains=term) | Q(category__icontains=term) | Q(barcode__iexact=term)
    )
