"""
======================================================
PATH: sales/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Bill + BillLine

- Bill identifiers (reference_number, barcode) are unique.
- BillLine.stock_item is SET_NULL (traceability only).
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Bill",
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
                (
                    "reference_number",
                    models.CharField(
                        max_length=32,
                        unique=True,
                        help_text="Human-facing reference printed on the receipt (REF-xxxxxxxx)",
                    ),
                ),
                (
                    "barcode",
                    models.CharField(
                        max_length=32,
                        unique=True,
                        help_text="Machine-facing identifier encoded in the receipt barcode",
                    ),
                ),
                ("subtotal", models.DecimalField(max_digits=12, decimal_places=2)),
                (
                    "discount_amount",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "discount_kind",
                    models.CharField(
                        max_length=16,
                        choices=[("percentage", "Percentage"), ("amount", "Fixed amount")],
                        default="percentage",
                    ),
                ),
                (
                    "discount_value",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Percent (e.g. 10.00) if percentage; currency amount if amount.",
                    ),
                ),
                ("total", models.DecimalField(max_digits=12, decimal_places=2)),
                ("paid_amount", models.DecimalField(max_digits=12, decimal_places=2)),
                ("change_amount", models.DecimalField(max_digits=12, decimal_places=2)),
                (
                    "customer_name",
                    models.CharField(max_length=255, blank=True, default=""),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=16,
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("reprinted", "Reprinted"),
                        ],
                        default="completed",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bills",
                        to=settings.AUTH_USER_MODEL,
                        help_text="Staff member who committed the sale",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="bill_created_at_idx"),
                    models.Index(fields=["status"], name="bill_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total__gte=0),
                        name="chk_bill_total_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(paid_amount__gte=models.F("total")),
                        name="chk_bill_paid_covers_total",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BillLine",
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
                ("item_name", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(max_digits=10, decimal_places=2)),
                (
                    "line_total",
                    models.DecimalField(max_digits=12, decimal_places=2, editable=False),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "bill",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="sales.bill",
                    ),
                ),
                (
                    "stock_item",
                    models.ForeignKey(
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bill_lines",
                        to="inventory.stockitem",
                    ),
                ),
            ],
            options={
                "ordering": ["bill", "position"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=1),
                        name="chk_billline_quantity_gte_one",
                    ),
                ],
            },
        ),
    ]
