# sales/models/bill_line.py

"""
BILL LINE (IMMUTABLE SNAPSHOT)

One row per cart line at commit time.

Notes:
- item_name / unit_price are snapshots: later edits to the stock item
  never change what the customer was charged
- stock_item is kept for traceability only and is nulled if the item is
  deleted from inventory
- created with its Bill and never edited or deleted on its own
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from inventory.models import StockItem

from .bill import Bill


class BillLine(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    bill = models.ForeignKey(
        Bill,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    stock_item = models.ForeignKey(
        StockItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bill_lines",
    )

    item_name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField()

    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    # Position of the line in the cart (receipts print in cart order)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["bill", "position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="chk_billline_quantity_gte_one",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("BillLine records are immutable")

        self.line_total = Decimal(self.unit_price) * Decimal(int(self.quantity or 0))
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("BillLine records cannot be deleted independently")

    def __str__(self):
        return f"{self.item_name} x {self.quantity}"
