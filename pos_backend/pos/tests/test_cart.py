# pos/tests/test_cart.py

"""
CART AGGREGATOR TESTS

Pure in-memory: no database access.
"""

import uuid
from decimal import Decimal

from django.test import SimpleTestCase

from inventory.models import StockItem
from pos.cart import (
    Cart,
    CartLineNotFound,
    CartStockLimitError,
    CartTotals,
    Discount,
    InvalidDiscountError,
)


def _item(name="Pen", price="100.00", stock=10):
    return StockItem(
        id=uuid.uuid4(),
        name=name,
        retail_price=Decimal(price),
        current_stock=stock,
    )


class CartAddItemTests(SimpleTestCase):
    def setUp(self):
        self.cart = Cart()
        self.pen = _item()

    def test_add_new_line_snapshots_item(self):
        line = self.cart.add_item(self.pen, 3)

        self.assertEqual(len(self.cart.lines), 1)
        self.assertEqual(line.item_id, str(self.pen.id))
        self.assertEqual(line.name, "Pen")
        self.assertEqual(line.unit_price, Decimal("100.00"))
        self.assertEqual(line.available_stock, 10)
        self.assertEqual(line.quantity, 3)

    def test_default_quantity_is_one(self):
        self.assertEqual(self.cart.add_item(self.pen).quantity, 1)

    def test_adding_same_item_merges_and_refreshes_snapshot(self):
        self.cart.add_item(self.pen, 2)
        self.pen.retail_price = Decimal("110.00")
        self.pen.current_stock = 8

        line = self.cart.add_item(self.pen, 3)

        self.assertEqual(len(self.cart.lines), 1)
        self.assertEqual(line.quantity, 5)
        self.assertEqual(line.unit_price, Decimal("110.00"))
        self.assertEqual(line.available_stock, 8)

    def test_exceeding_stock_rejected_without_change(self):
        self.cart.add_item(self.pen, 8)

        with self.assertRaises(CartStockLimitError) as ctx:
            self.cart.add_item(self.pen, 3)

        self.assertEqual(ctx.exception.item_name, "Pen")
        self.assertEqual(ctx.exception.available, 10)
        self.assertEqual(ctx.exception.requested, 11)
        self.assertEqual(self.cart.lines[0].quantity, 8)

    def test_out_of_stock_rejected(self):
        with self.assertRaises(CartStockLimitError):
            self.cart.add_item(_item(stock=0))
        self.assertTrue(self.cart.is_empty)

    def test_non_positive_quantity_rejected(self):
        with self.assertRaises(ValueError):
            self.cart.add_item(self.pen, 0)
        with self.assertRaises(ValueError):
            self.cart.add_item(self.pen, True)

    def test_lines_keep_insertion_order(self):
        self.cart.add_item(_item(name="B"))
        self.cart.add_item(_item(name="A"))
        self.cart.add_item(_item(name="C"))
        self.assertEqual([line.name for line in self.cart.lines], ["B", "A", "C"])


class CartQuantityTests(SimpleTestCase):
    def setUp(self):
        self.cart = Cart()
        self.line = self.cart.add_item(_item(stock=5), 2)

    def test_set_quantity(self):
        self.cart.set_quantity(self.line.id, 5)
        self.assertEqual(self.line.quantity, 5)

    def test_set_quantity_above_snapshot_rejected(self):
        with self.assertRaises(CartStockLimitError) as ctx:
            self.cart.set_quantity(self.line.id, 6)
        self.assertEqual(ctx.exception.available, 5)
        self.assertEqual(ctx.exception.requested, 6)
        self.assertEqual(self.line.quantity, 2)

    def test_zero_or_negative_removes_line(self):
        self.assertIsNone(self.cart.set_quantity(self.line.id, 0))
        self.assertTrue(self.cart.is_empty)

        line = self.cart.add_item(_item(), 1)
        self.cart.set_quantity(line.id, -3)
        self.assertTrue(self.cart.is_empty)

    def test_unknown_line(self):
        with self.assertRaises(CartLineNotFound):
            self.cart.set_quantity("nope", 1)
        with self.assertRaises(CartLineNotFound):
            self.cart.remove_line("nope")

    def test_remove_line(self):
        self.cart.remove_line(self.line.id)
        self.assertTrue(self.cart.is_empty)


class CartDiscountTests(SimpleTestCase):
    def test_percentage_discount_on_500(self):
        cart = Cart()
        cart.add_item(_item(price="250.00"), 2)
        cart.apply_discount(Decimal("10"), "percentage")

        self.assertEqual(
            cart.compute_totals(),
            CartTotals(
                subtotal=Decimal("500.00"),
                discount_amount=Decimal("50.00"),
                total=Decimal("450.00"),
            ),
        )

    def test_percentage_rounds_half_up_once(self):
        cart = Cart()
        cart.add_item(_item(price="0.50"), 1)
        cart.apply_discount("5", "percentage")

        # 0.50 * 5% = 0.025 -> 0.03
        totals = cart.compute_totals()
        self.assertEqual(totals.discount_amount, Decimal("0.03"))
        self.assertEqual(totals.total, Decimal("0.47"))

    def test_amount_discount(self):
        cart = Cart()
        cart.add_item(_item(price="100.00"), 3)
        cart.apply_discount("25.50", "amount")

        totals = cart.compute_totals()
        self.assertEqual(totals.discount_amount, Decimal("25.50"))
        self.assertEqual(totals.total, Decimal("274.50"))

    def test_discount_capped_at_subtotal(self):
        cart = Cart()
        cart.add_item(_item(price="100.00"), 1)
        cart.apply_discount("500", "amount")

        totals = cart.compute_totals()
        self.assertEqual(totals.discount_amount, Decimal("100.00"))
        self.assertEqual(totals.total, Decimal("0.00"))

    def test_full_percentage_allowed(self):
        cart = Cart()
        cart.add_item(_item(price="80.00"), 1)
        cart.apply_discount("100", "percentage")
        self.assertEqual(cart.compute_totals().total, Decimal("0.00"))

    def test_invalid_discounts(self):
        cart = Cart()
        for value, kind in [
            ("-1", "amount"),
            ("100.01", "percentage"),
            ("10", "coupon"),
            ("abc", "amount"),
            ("NaN", "amount"),
        ]:
            with self.subTest(value=value, kind=kind):
                with self.assertRaises(InvalidDiscountError):
                    cart.apply_discount(value, kind)

        self.assertEqual(cart.discount, Discount())

    def test_totals_are_idempotent(self):
        cart = Cart()
        cart.add_item(_item(price="33.33"), 3)
        cart.add_item(_item(name="Ink", price="19.99"), 2)
        cart.apply_discount("12.5", "percentage")

        self.assertEqual(cart.compute_totals(), cart.compute_totals())

    def test_empty_cart_totals(self):
        totals = Cart().compute_totals()
        self.assertEqual(totals.subtotal, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("0.00"))


class CartLifecycleTests(SimpleTestCase):
    def test_clear_resets_everything(self):
        cart = Cart()
        cart.add_item(_item(), 2)
        cart.apply_discount("10", "percentage")
        cart.set_customer_name("  Nimal  ")
        self.assertEqual(cart.customer_name, "Nimal")

        cart.clear()

        self.assertTrue(cart.is_empty)
        self.assertEqual(cart.customer_name, "")
        self.assertEqual(cart.discount, Discount())

    def test_session_round_trip_keeps_totals(self):
        cart = Cart()
        cart.add_item(_item(price="19.99"), 3)
        cart.apply_discount("5", "amount")
        cart.set_customer_name("Kamala")

        restored = Cart.from_dict(cart.to_dict())

        self.assertEqual(restored.to_dict(), cart.to_dict())
        self.assertEqual(restored.compute_totals(), cart.compute_totals())

    def test_from_empty_session(self):
        self.assertTrue(Cart.from_dict(None).is_empty)
        self.assertTrue(Cart.from_dict({}).is_empty)

    def test_reprice_refreshes_and_reports_stale(self):
        pen = _item(name="Pen", price="100.00", stock=10)
        gone = _item(name="Old Stock", price="5.00", stock=3)

        cart = Cart()
        cart.add_item(pen, 2)
        stale_line = cart.add_item(gone, 1)

        pen.retail_price = Decimal("120.00")
        pen.current_stock = 1

        stale = cart.reprice(lambda ids: {str(pen.id): pen})

        self.assertEqual(len(stale), 1)
        self.assertEqual(stale[0].line_id, stale_line.id)
        self.assertEqual(stale[0].name, "Old Stock")

        pen_line = cart.line_for_item(pen.id)
        self.assertEqual(pen_line.unit_price, Decimal("120.00"))
        self.assertEqual(pen_line.available_stock, 1)
        # quantity is left for the committer to judge
        self.assertEqual(pen_line.quantity, 2)
