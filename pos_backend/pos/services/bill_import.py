# pos/services/bill_import.py

"""
IMPORT A PREVIOUS BILL INTO THE CART

Convenience for "same again" sales: every line of an earlier bill is re-added
to the cart at today's price, best effort:
- items deleted from inventory or sold out are skipped
- quantities are clamped to what is on hand now
Nothing is committed; the normal checkout still revalidates everything.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from inventory.services.stock import get_live_items
from pos.cart import Cart


@dataclass
class ImportReport:
    added: list[dict] = field(default_factory=list)
    clamped: list[dict] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"added": self.added, "clamped": self.clamped, "skipped": self.skipped}


def load_bill_into_cart(*, cart: Cart, bill, lookup=get_live_items) -> ImportReport:
    report = ImportReport()

    lines = list(bill.lines.all().order_by("position"))
    live = lookup([line.stock_item_id for line in lines if line.stock_item_id])

    for line in lines:
        item = live.get(str(line.stock_item_id)) if line.stock_item_id else None
        if item is None:
            report.skipped.append(
                {"item_name": line.item_name, "reason": "no longer in inventory"}
            )
            continue

        existing = cart.line_for_item(item.id)
        room = int(item.current_stock) - (existing.quantity if existing else 0)
        if room <= 0:
            report.skipped.append({"item_name": item.name, "reason": "out of stock"})
            continue

        qty = min(int(line.quantity), room)
        cart.add_item(item, qty)

        entry = {"item_name": item.name, "quantity": qty}
        report.added.append(entry)
        if qty < line.quantity:
            report.clamped.append(
                {"item_name": item.name, "requested": line.quantity, "quantity": qty}
            )

    if not cart.customer_name and bill.customer_name:
        cart.set_customer_name(bill.customer_name)

    return report
