# sales/tests/test_bills_api.py

from django.test import TestCase
from rest_framework.test import APIClient

from sales.models import Bill
from sales.services.sale_committer import commit_sale

from .helpers import cart_with, make_item, make_user


class BillAPITests(TestCase):
    """
    GUARANTEES:
    - Any till user can browse and search bill history
    - Bills are read-only through this API
    - Only owner / manager can reprint
    """

    def setUp(self):
        self.client = APIClient()
        self.cashier = make_user(email="cashier@example.com", role="cashier")
        self.manager = make_user(email="manager@example.com", role="manager")

        pen = make_item(name="Pen", price="100.00", stock=50)
        self.bill_a = commit_sale(
            cart=cart_with((pen, 1), customer_name="Nimal Perera"),
            paid_amount="100",
            user=self.cashier,
        )
        self.bill_b = commit_sale(
            cart=cart_with((pen, 2), customer_name="Kamala"),
            paid_amount="200",
            user=self.cashier,
        )

    def test_anonymous_denied(self):
        res = self.client.get("/api/sales/bills/")
        self.assertEqual(res.status_code, 401)

    def test_list_and_search(self):
        self.client.force_authenticate(user=self.cashier)

        res = self.client.get("/api/sales/bills/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 2)

        res = self.client.get("/api/sales/bills/", {"q": "nimal"})
        self.assertEqual([r["id"] for r in res.data["results"]], [str(self.bill_a.id)])

        res = self.client.get("/api/sales/bills/", {"q": self.bill_b.reference_number})
        self.assertEqual([r["id"] for r in res.data["results"]], [str(self.bill_b.id)])

        res = self.client.get("/api/sales/bills/", {"status": "reprinted"})
        self.assertEqual(res.data["count"], 0)

    def test_retrieve_includes_lines(self):
        self.client.force_authenticate(user=self.cashier)
        res = self.client.get(f"/api/sales/bills/{self.bill_b.id}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["total"], "200.00")
        self.assertEqual(res.data["lines"][0]["quantity"], 2)
        self.assertEqual(res.data["created_by_name"], "cashier@example.com")

    def test_bills_cannot_be_created_or_deleted_via_api(self):
        self.client.force_authenticate(user=self.manager)

        res = self.client.post("/api/sales/bills/", {}, format="json")
        self.assertEqual(res.status_code, 405)

        res = self.client.delete(f"/api/sales/bills/{self.bill_a.id}/")
        self.assertEqual(res.status_code, 405)

    def test_receipt(self):
        self.client.force_authenticate(user=self.cashier)
        res = self.client.get(f"/api/sales/bills/{self.bill_a.id}/receipt/")
        self.assertEqual(res.status_code, 200)
        self.assertIn(self.bill_a.reference_number, res.data["receipt_text"])

    def test_cashier_cannot_reprint(self):
        self.client.force_authenticate(user=self.cashier)
        res = self.client.post(f"/api/sales/bills/{self.bill_a.id}/reprint/")
        self.assertEqual(res.status_code, 403)
        self.assertEqual(Bill.objects.get(pk=self.bill_a.pk).status, Bill.STATUS_COMPLETED)

    def test_manager_reprints(self):
        self.client.force_authenticate(user=self.manager)

        res = self.client.post(f"/api/sales/bills/{self.bill_a.id}/reprint/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "reprinted")
        self.assertIn("REPRINT", res.data["receipt_text"])

        # again: still fine, still reprinted
        res = self.client.post(f"/api/sales/bills/{self.bill_a.id}/reprint/")
        self.assertEqual(res.status_code, 200)

    def test_by_barcode(self):
        self.client.force_authenticate(user=self.cashier)

        res = self.client.get(f"/api/sales/bills/by-barcode/{self.bill_b.barcode}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["id"], str(self.bill_b.id))

        res = self.client.get("/api/sales/bills/by-barcode/123/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")
