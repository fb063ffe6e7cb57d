# sales/tests/test_receipt.py

from django.test import TestCase, override_settings

from sales.services.bill_lifecycle import reprint_bill
from sales.services.receipt import render_receipt
from sales.services.sale_committer import commit_sale

from .helpers import cart_with, make_item, make_user

SHOP = {
    "NAME": "Newsiri Trade Center",
    "ADDRESS": "12 Main Street",
    "PHONE": "011 234 5678",
    "CURRENCY_SYMBOL": "Rs.",
}


@override_settings(SHOP=SHOP)
class ReceiptTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.user.name = "Front Till"
        self.user.save()

        pen = make_item(name="Pen", price="100.00", stock=10)
        lamp = make_item(name="Lamp", price="250.00", stock=4)
        cart = cart_with(
            (pen, 3),
            (lamp, 2),
            discount=("10", "percentage"),
            customer_name="Nimal",
        )
        self.bill = commit_sale(cart=cart, paid_amount="800", user=self.user)

    def test_receipt_contents(self):
        text = render_receipt(self.bill)

        self.assertIn("Newsiri Trade Center", text)
        self.assertIn("12 Main Street", text)
        self.assertIn(self.bill.reference_number, text)
        self.assertIn(self.bill.barcode, text)
        self.assertIn("Customer:", text)
        self.assertIn("Nimal", text)
        self.assertIn("Front Till", text)
        self.assertIn("3 x 100.00", text)
        self.assertIn("Discount (10%)", text)
        self.assertIn("Rs. 800.00", text)
        self.assertIn("Rs. 720.00", text)
        self.assertIn("Rs. 80.00", text)
        self.assertNotIn("REPRINT", text)

    def test_lines_fit_receipt_width(self):
        for row in render_receipt(self.bill).splitlines():
            self.assertLessEqual(len(row), 40, row)

    def test_reprint_is_marked(self):
        bill = reprint_bill(bill=self.bill)
        self.assertIn("** REPRINT **", render_receipt(bill))
