# sales/models/bill.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Bill(models.Model):
    """
    A committed sale: the durable financial record produced by checkout.

    GUARANTEES:
    - Written only by the sale committer, together with its lines and the
      matching stock decrements (one transaction)
    - Immutable once created; the only permitted change is
      status completed -> reprinted
    - subtotal == sum(line_total); total == subtotal - discount_amount
    """

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_REPRINTED = "reprinted"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_REPRINTED, "Reprinted"),
    ]

    # pending is reserved for a future held-bill flow; nothing writes it today
    STATUS_TRANSITIONS = {
        STATUS_COMPLETED: {STATUS_REPRINTED},
    }

    # Statuses that represent money actually taken
    SETTLED_STATUSES = (STATUS_COMPLETED, STATUS_REPRINTED)

    DISCOUNT_PERCENTAGE = "percentage"
    DISCOUNT_AMOUNT = "amount"

    DISCOUNT_CHOICES = [
        (DISCOUNT_PERCENTAGE, "Percentage"),
        (DISCOUNT_AMOUNT, "Fixed amount"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    reference_number = models.CharField(
        max_length=32,
        unique=True,
        help_text="Human-facing reference printed on the receipt (REF-xxxxxxxx)",
    )

    barcode = models.CharField(
        max_length=32,
        unique=True,
        help_text="Machine-facing identifier encoded in the receipt barcode",
    )

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_kind = models.CharField(
        max_length=16,
        choices=DISCOUNT_CHOICES,
        default=DISCOUNT_PERCENTAGE,
    )
    discount_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Percent (e.g. 10.00) if percentage; currency amount if amount.",
    )
    total = models.DecimalField(max_digits=12, decimal_places=2)

    paid_amount = models.DecimalField(max_digits=12, decimal_places=2)
    change_amount = models.DecimalField(max_digits=12, decimal_places=2)

    customer_name = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills",
        help_text="Staff member who committed the sale",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="bill_created_at_idx"),
            models.Index(fields=["status"], name="bill_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="chk_bill_total_gte_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=models.F("total")),
                name="chk_bill_paid_covers_total",
            ),
        ]

    _IMMUTABLE_FIELDS = (
        "reference_number",
        "barcode",
        "subtotal",
        "discount_amount",
        "discount_kind",
        "discount_value",
        "total",
        "paid_amount",
        "change_amount",
        "customer_name",
        "created_at",
        "created_by_id",
    )

    def _validate_immutable(self, previous: "Bill"):
        if self.status != previous.status:
            allowed = self.STATUS_TRANSITIONS.get(previous.status, set())
            if self.status not in allowed:
                raise ValueError(
                    f"Bill is immutable. "
                    f"Status change {previous.status} -> {self.status} is not allowed."
                )

        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(f"Bill is immutable. Field '{field}' cannot be changed.")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Bill.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Bills are financial records and cannot be deleted")

    def __str__(self):
        return f"{self.reference_number} | {self.total}"
