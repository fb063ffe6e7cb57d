# sales/tests/test_identifiers.py

from decimal import Decimal

from django.test import TestCase

from sales.models import Bill
from sales.services.identifiers import allocate_identifiers, identifiers_for


def _bill(reference_number, barcode):
    return Bill.objects.create(
        reference_number=reference_number,
        barcode=barcode,
        subtotal=Decimal("1.00"),
        total=Decimal("1.00"),
        paid_amount=Decimal("1.00"),
        change_amount=Decimal("0.00"),
    )


class IdentifierTests(TestCase):
    def test_identifiers_for_instant(self):
        self.assertEqual(
            identifiers_for(1718000123456),
            ("REF-00123456", "1718000123456"),
        )

    def test_free_instant_is_used_as_is(self):
        self.assertEqual(
            allocate_identifiers(epoch_ms=1718000123456),
            ("REF-00123456", "1718000123456"),
        )

    def test_barcode_collision_bumps_by_one_ms(self):
        _bill("REF-OTHER", "1718000123456")
        self.assertEqual(
            allocate_identifiers(epoch_ms=1718000123456),
            ("REF-00123457", "1718000123457"),
        )

    def test_reference_collision_bumps_until_both_free(self):
        # same last 8 digits from an earlier day, plus the next ms taken too
        _bill("REF-00123456", "1717000123456")
        _bill("REF-00123457", "1717000123457")
        self.assertEqual(
            allocate_identifiers(epoch_ms=1718000123456),
            ("REF-00123458", "1718000123458"),
        )
