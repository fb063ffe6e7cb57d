# pos/cart.py

"""
CART AGGREGATOR

The in-progress sale, held in the cashier's working memory (the Django
session), never in the domain tables.

Hard rules:
- Quantities are integer units; a line always has quantity >= 1.
- A line's quantity never exceeds the stock snapshotted for it at the time
  of the mutation. The snapshot is advisory only: the sale committer
  revalidates against live rows.
- Totals are derived on demand and never stored.
- Money is Decimal. A percentage discount is rounded once, half up, to
  2 places, and is capped at the subtotal (total never goes below 0.00).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)

    raise ValueError("quantity must be a whole integer unit")


# ============================================================
# DOMAIN ERRORS
# ============================================================


class CartError(Exception):
    pass


class CartStockLimitError(CartError):
    def __init__(self, item_name: str, available: int, requested: int):
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Only {available} of '{item_name}' in stock (requested {requested})"
        )


class CartLineNotFound(CartError):
    def __init__(self, line_id: str):
        self.line_id = line_id
        super().__init__(f"Cart line '{line_id}' not found")


class InvalidDiscountError(CartError):
    pass


# ============================================================
# VALUE TYPES
# ============================================================


@dataclass
class CartLine:
    id: str
    item_id: str
    name: str
    unit_price: Decimal
    available_stock: int
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return _money(self.unit_price * self.quantity)

    def refresh_snapshot(self, item) -> None:
        self.name = item.name
        self.unit_price = _money(item.retail_price)
        self.available_stock = int(item.current_stock)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "available_stock": self.available_stock,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            id=str(data["id"]),
            item_id=str(data["item_id"]),
            name=str(data.get("name") or ""),
            unit_price=_money(data.get("unit_price")),
            available_stock=int(data.get("available_stock") or 0),
            quantity=int(data["quantity"]),
        )


@dataclass(frozen=True)
class Discount:
    PERCENTAGE = "percentage"
    AMOUNT = "amount"
    KINDS = (PERCENTAGE, AMOUNT)

    value: Decimal = ZERO
    kind: str = PERCENTAGE

    @classmethod
    def build(cls, value, kind) -> "Discount":
        kind = (kind or "").strip().lower()
        if kind not in cls.KINDS:
            raise InvalidDiscountError(
                f"Unknown discount kind '{kind}'. Use one of: {', '.join(cls.KINDS)}"
            )

        try:
            amount = Decimal(str(value if value not in (None, "") else "0"))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidDiscountError("Discount value must be a number") from exc

        if not amount.is_finite():
            raise InvalidDiscountError("Discount value must be a number")
        if amount < 0:
            raise InvalidDiscountError("Discount value cannot be negative")
        if kind == cls.PERCENTAGE and amount > HUNDRED:
            raise InvalidDiscountError("Percentage discount cannot exceed 100")

        return cls(value=amount, kind=kind)

    def amount_for(self, subtotal: Decimal) -> Decimal:
        """
        Discount in currency for the given subtotal, rounded once and capped.
        """
        if self.kind == self.PERCENTAGE:
            raw = subtotal * self.value / HUNDRED
        else:
            raw = self.value

        return min(_money(raw), subtotal)


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class StaleLineWarning:
    line_id: str
    item_id: str
    name: str
    message: str = "This item no longer exists in inventory"


# ============================================================
# CART
# ============================================================


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)
    customer_name: str = ""
    discount: Discount = field(default_factory=Discount)

    # ---------------- queries ----------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get_line(self, line_id: str) -> CartLine:
        for line in self.lines:
            if line.id == str(line_id):
                return line
        raise CartLineNotFound(str(line_id))

    def line_for_item(self, item_id) -> CartLine | None:
        item_id = str(item_id)
        for line in self.lines:
            if line.item_id == item_id:
                return line
        return None

    def compute_totals(self) -> CartTotals:
        subtotal = _money(sum((line.line_total for line in self.lines), ZERO))
        discount_amount = self.discount.amount_for(subtotal)
        return CartTotals(
            subtotal=subtotal,
            discount_amount=discount_amount,
            total=subtotal - discount_amount,
        )

    # ---------------- mutations ----------------

    def add_item(self, item, requested_qty=1) -> CartLine:
        """
        Add `requested_qty` units of a stock item.

        Merges into the existing line for the same item (refreshing its
        snapshot) or appends a new line. Rejected without any change when the
        resulting quantity would exceed the item's stock.
        """
        qty = _to_int_qty(requested_qty)
        if qty < 1:
            raise ValueError("quantity must be at least 1")

        available = int(item.current_stock)
        existing = self.line_for_item(item.id)
        new_qty = qty + (existing.quantity if existing else 0)

        if available <= 0 or new_qty > available:
            raise CartStockLimitError(item.name, available, new_qty)

        if existing is not None:
            existing.refresh_snapshot(item)
            existing.quantity = new_qty
            return existing

        line = CartLine(
            id=uuid.uuid4().hex,
            item_id=str(item.id),
            name=item.name,
            unit_price=_money(item.retail_price),
            available_stock=available,
            quantity=new_qty,
        )
        self.lines.append(line)
        return line

    def set_quantity(self, line_id, qty) -> CartLine | None:
        """
        Set a line's quantity. qty <= 0 removes the line (returns None).
        """
        line = self.get_line(line_id)
        qty = _to_int_qty(qty)

        if qty <= 0:
            self.lines.remove(line)
            return None

        if qty > line.available_stock:
            raise CartStockLimitError(line.name, line.available_stock, qty)

        line.quantity = qty
        return line

    def remove_line(self, line_id) -> None:
        self.lines.remove(self.get_line(line_id))

    def apply_discount(self, value, kind) -> Discount:
        self.discount = Discount.build(value, kind)
        return self.discount

    def set_customer_name(self, name) -> None:
        self.customer_name = (name or "").strip()

    def clear(self) -> None:
        self.lines = []
        self.customer_name = ""
        self.discount = Discount()

    def reprice(self, lookup) -> list[StaleLineWarning]:
        """
        Refresh every line's snapshot from live items.

        `lookup(item_ids)` returns {str(item_id): item} for the items that
        still exist. Lines whose item is gone are kept (the cashier decides)
        and reported. Quantities are not changed here: a line now above its
        refreshed stock will be refused at commit.
        """
        live = lookup([line.item_id for line in self.lines])

        stale = []
        for line in self.lines:
            item = live.get(line.item_id)
            if item is None:
                stale.append(
                    StaleLineWarning(line_id=line.id, item_id=line.item_id, name=line.name)
                )
                continue
            line.refresh_snapshot(item)

        return stale

    # ---------------- session (de)serialization ----------------

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "customer_name": self.customer_name,
            "discount": {"value": str(self.discount.value), "kind": self.discount.kind},
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "Cart":
        if not data:
            return cls()

        raw_discount = data.get("discount") or {}
        return cls(
            lines=[CartLine.from_dict(row) for row in data.get("lines") or []],
            customer_name=str(data.get("customer_name") or ""),
            discount=Discount.build(
                raw_discount.get("value", "0"),
                raw_discount.get("kind", Discount.PERCENTAGE),
            ),
        )
