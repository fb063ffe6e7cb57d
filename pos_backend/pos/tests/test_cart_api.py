# pos/tests/test_cart_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import StockItem
from sales.models import Bill

User = get_user_model()


def _create_item(name="Pen", price="100.00", stock=10, barcode=None):
    return StockItem.objects.create(
        name=name,
        retail_price=Decimal(price),
        current_stock=stock,
        barcode=barcode,
    )


class POSCartAPITests(TestCase):
    """
    POS session cart API.

    GUARANTEES:
    - Cart lives in the session and survives between requests
    - Totals are derived server-side on every response
    - Stock ceilings are enforced on add / update
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="cashier@example.com", password="pass", role="cashier"
        )
        self.client.force_authenticate(user=self.user)

        self.pen = _create_item(name="Pen", price="100.00", stock=10, barcode="PEN-1")
        self.lamp = _create_item(name="Lamp", price="250.00", stock=4)

    def _add(self, **payload):
        return self.client.post("/api/pos/cart/items/add/", payload, format="json")

    # -----------------------------
    # Read / add
    # -----------------------------

    def test_requires_authentication(self):
        anon = APIClient()
        res = anon.get("/api/pos/cart/")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_empty_cart(self):
        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["lines"], [])
        self.assertEqual(res.data["totals"]["total"], "0.00")

    def test_add_by_id_and_barcode_merges(self):
        res = self._add(stock_item_id=str(self.pen.id), quantity=2)
        self.assertEqual(res.status_code, 200, res.data)

        res = self._add(barcode="PEN-1")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["lines"]), 1)
        self.assertEqual(res.data["lines"][0]["quantity"], 3)
        self.assertEqual(res.data["item_count"], 3)
        self.assertEqual(res.data["totals"]["subtotal"], "300.00")

        # persisted in the session
        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.data["lines"][0]["quantity"], 3)

    def test_add_requires_reference(self):
        res = self._add(quantity=1)
        self.assertEqual(res.status_code, 400)

    def test_add_unknown_barcode(self):
        res = self._add(barcode="NOPE")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_add_beyond_stock(self):
        res = self._add(stock_item_id=str(self.lamp.id), quantity=5)
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "STOCK_LIMIT")
        self.assertEqual(res.data["error"]["available"], 4)
        self.assertEqual(res.data["error"]["requested"], 5)

        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.data["lines"], [])

    # -----------------------------
    # Lines / discount / customer
    # -----------------------------

    def test_update_and_remove_line(self):
        res = self._add(stock_item_id=str(self.pen.id), quantity=1)
        line_id = res.data["lines"][0]["id"]

        res = self.client.patch(f"/api/pos/cart/lines/{line_id}/", {"quantity": 4}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["lines"][0]["quantity"], 4)

        res = self.client.patch(f"/api/pos/cart/lines/{line_id}/", {"quantity": 11}, format="json")
        self.assertEqual(res.status_code, 409)

        res = self.client.delete(f"/api/pos/cart/lines/{line_id}/remove/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["lines"], [])

        res = self.client.delete(f"/api/pos/cart/lines/{line_id}/remove/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "LINE_NOT_FOUND")

    def test_zero_quantity_removes_line(self):
        res = self._add(stock_item_id=str(self.pen.id), quantity=2)
        line_id = res.data["lines"][0]["id"]

        res = self.client.patch(f"/api/pos/cart/lines/{line_id}/", {"quantity": 0}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["lines"], [])

    def test_discount(self):
        self._add(stock_item_id=str(self.lamp.id), quantity=2)

        res = self.client.post(
            "/api/pos/cart/discount/", {"value": "10", "kind": "percentage"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["totals"]["discount_amount"], "50.00")
        self.assertEqual(res.data["totals"]["total"], "450.00")

        res = self.client.post(
            "/api/pos/cart/discount/", {"value": "101", "kind": "percentage"}, format="json"
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_DISCOUNT")

        res = self.client.post(
            "/api/pos/cart/discount/", {"value": "5", "kind": "coupon"}, format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_customer_name(self):
        res = self.client.post("/api/pos/cart/customer/", {"customer_name": " Nimal "}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["customer_name"], "Nimal")

    def test_clear(self):
        self._add(stock_item_id=str(self.pen.id), quantity=2)
        res = self.client.delete("/api/pos/cart/clear/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["lines"], [])

        self.pen.refresh_from_db()
        self.assertEqual(self.pen.current_stock, 10)

    def test_refresh_reports_stale_lines(self):
        self._add(stock_item_id=str(self.pen.id), quantity=1)
        self._add(stock_item_id=str(self.lamp.id), quantity=1)

        StockItem.objects.filter(pk=self.pen.pk).update(retail_price=Decimal("90.00"))
        self.lamp.delete()

        res = self.client.post("/api/pos/cart/refresh/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["stale_lines"]), 1)
        self.assertEqual(res.data["stale_lines"][0]["name"], "Lamp")
        self.assertEqual(res.data["lines"][0]["unit_price"], "90.00")


class POSCheckoutAPITests(TestCase):
    """
    GUARANTEES:
    - Successful checkout returns the bill and empties the cart
    - Failed checkout returns an explicit error and keeps the cart as it was
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="cashier@example.com", password="pass", role="cashier"
        )
        self.client.force_authenticate(user=self.user)
        self.pen = _create_item(name="Pen", price="100.00", stock=10)

        self.client.post(
            "/api/pos/cart/items/add/",
            {"stock_item_id": str(self.pen.id), "quantity": 3},
            format="json",
        )

    def _checkout(self, paid):
        return self.client.post("/api/pos/checkout/", {"paid_amount": paid}, format="json")

    def test_checkout_success(self):
        res = self._checkout("300.00")
        self.assertEqual(res.status_code, 201, res.data)

        self.assertEqual(res.data["total"], "300.00")
        self.assertEqual(res.data["change_amount"], "0.00")
        self.assertEqual(res.data["status"], "completed")
        self.assertTrue(res.data["reference_number"].startswith("REF-"))
        self.assertIn("receipt_text", res.data)

        bill = Bill.objects.get(pk=res.data["id"])
        self.assertEqual(bill.created_by, self.user)

        self.pen.refresh_from_db()
        self.assertEqual(self.pen.current_stock, 7)

        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.data["lines"], [])

    def test_underpayment_keeps_cart(self):
        res = self._checkout("250.00")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_PAYMENT")
        self.assertEqual(res.data["error"]["shortfall"], "50.00")

        self.assertFalse(Bill.objects.exists())
        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.data["lines"][0]["quantity"], 3)

    def test_stock_changed_keeps_cart(self):
        StockItem.objects.filter(pk=self.pen.pk).update(current_stock=2)

        res = self._checkout("300.00")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["item_name"], "Pen")
        self.assertEqual(res.data["error"]["available"], 2)
        self.assertEqual(res.data["error"]["requested"], 3)

        self.pen.refresh_from_db()
        self.assertEqual(self.pen.current_stock, 2)
        res = self.client.get("/api/pos/cart/")
        self.assertEqual(len(res.data["lines"]), 1)

    def test_deleted_item(self):
        self.pen.delete()
        res = self._checkout("300.00")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "STALE_ITEM")

    def test_empty_cart(self):
        self.client.delete("/api/pos/cart/clear/")
        res = self._checkout("0.00")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")

    def test_negative_payment_rejected(self):
        res = self._checkout("-1.00")
        self.assertEqual(res.status_code, 400)


class POSCartOwnershipTests(TestCase):
    """
    GUARANTEES:
    - A cart is only visible to the cashier who built it
    - Switching JWT credentials on the same terminal never inherits a cart
    - A bill is never stamped with a cashier who did not build the cart
    """

    def setUp(self):
        self.client = APIClient()
        self.cashier_a = User.objects.create_user(
            email="a@example.com", password="pass-a-123", role="cashier"
        )
        self.cashier_b = User.objects.create_user(
            email="b@example.com", password="pass-b-123", role="cashier"
        )
        self.pen = _create_item(name="Pen", price="100.00", stock=10)

    def _login(self, email, password):
        res = self.client.post(
            "/api/auth/jwt/create/", {"email": email, "password": password}, format="json"
        )
        self.assertEqual(res.status_code, 200, res.data)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")

    def test_second_cashier_does_not_inherit_cart(self):
        self._login("a@example.com", "pass-a-123")
        res = self.client.post(
            "/api/pos/cart/items/add/",
            {"stock_item_id": str(self.pen.id), "quantity": 3},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)

        self._login("b@example.com", "pass-b-123")

        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["lines"], [])

        res = self.client.post("/api/pos/checkout/", {"paid_amount": "300.00"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")

        self.assertFalse(Bill.objects.exists())
        self.pen.refresh_from_db()
        self.assertEqual(self.pen.current_stock, 10)

        # the first cashier's cart is still there for them
        self._login("a@example.com", "pass-a-123")
        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.data["lines"][0]["quantity"], 3)

    def test_checkout_stamps_the_cart_owner(self):
        self._login("a@example.com", "pass-a-123")
        self.client.post(
            "/api/pos/cart/items/add/",
            {"stock_item_id": str(self.pen.id), "quantity": 1},
            format="json",
        )

        res = self.client.post("/api/pos/checkout/", {"paid_amount": "100.00"}, format="json")
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(Bill.objects.get(pk=res.data["id"]).created_by, self.cashier_a)
