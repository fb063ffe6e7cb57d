# inventory/models/stock_item.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class StockItem(models.Model):
    """
    A sellable item with its on-hand quantity.

    STOCK MODEL:
    - current_stock is the single source of truth for availability
    - it can never go negative (DB check + conditional decrement on sale)
    - on the sale path only the sale committer writes it
    - everything else (create / edit / delete) is inventory management
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    category = models.CharField(max_length=120, blank=True, default="")

    retail_price = models.DecimalField(max_digits=10, decimal_places=2)
    unit_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    current_stock = models.PositiveIntegerField(default=0)
    low_stock_alert = models.PositiveIntegerField(default=10)

    # NULL (not "") when absent so the unique index allows many unlabelled items
    barcode = models.CharField(max_length=64, unique=True, null=True, blank=True)

    received_date = models.DateField(null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="stockitem_category_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_stock__gte=0),
                name="chk_stockitem_current_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(retail_price__gte=0),
                name="chk_stockitem_retail_price_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.current_stock})"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "name is required"})

        if self.retail_price is None or Decimal(self.retail_price) < Decimal("0.00"):
            raise ValidationError({"retail_price": "retail_price must be non-negative"})

        if self.unit_cost is not None and Decimal(self.unit_cost) < Decimal("0.00"):
            raise ValidationError({"unit_cost": "unit_cost must be non-negative"})

        if self.received_date and self.expiry_date and self.expiry_date < self.received_date:
            raise ValidationError({"expiry_date": "expiry_date cannot precede received_date"})

    def save(self, *args, **kwargs):
        self.barcode = (self.barcode or "").strip() or None
        self.category = (self.category or "").strip()
        super().save(*args, **kwargs)

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.low_stock_alert

    @property
    def in_stock(self) -> bool:
        return self.current_stock > 0
