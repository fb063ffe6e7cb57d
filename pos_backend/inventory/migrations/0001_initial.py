"""
======================================================
PATH: inventory/migrations/0001_initial.py
======================================================
MIGRATION: CREATE StockItem

- current_stock is unsigned and carries a >= 0 check constraint.
- barcode is nullable + unique (NULL for unlabelled items).
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StockItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255, db_index=True)),
                ("category", models.CharField(max_length=120, blank=True, default="")),
                ("retail_price", models.DecimalField(max_digits=10, decimal_places=2)),
                (
                    "unit_cost",
                    models.DecimalField(
                        max_digits=10,
                        decimal_places=2,
                        default=Decimal("0.00"),
                    ),
                ),
                ("current_stock", models.PositiveIntegerField(default=0)),
                ("low_stock_alert", models.PositiveIntegerField(default=10)),
                (
                    "barcode",
                    models.CharField(max_length=64, unique=True, null=True, blank=True),
                ),
                ("received_date", models.DateField(null=True, blank=True)),
                ("expiry_date", models.DateField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["category"], name="stockitem_category_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(current_stock__gte=0),
                        name="chk_stockitem_current_stock_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(retail_price__gte=0),
                        name="chk_stockitem_retail_price_gte_zero",
                    ),
                ],
            },
        ),
    ]
