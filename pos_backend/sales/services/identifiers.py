# sales/services/identifiers.py

"""
BILL IDENTIFIERS

Both identifiers derive from the commit instant in epoch milliseconds:
- reference_number: "REF-" + last 8 digits (printed, read aloud)
- barcode:          full epoch ms (scanned)

If either is already taken, the instant is bumped by 1 ms until both are
free. Two sessions can still pick the same value concurrently; the unique
indexes reject the loser and the committer retries.
"""

from __future__ import annotations

from django.db.models import Q
from django.utils import timezone

from sales.models import Bill

REFERENCE_PREFIX = "REF-"


def _epoch_ms() -> int:
    return int(timezone.now().timestamp() * 1000)


def identifiers_for(epoch_ms: int) -> tuple[str, str]:
    digits = str(epoch_ms)
    return f"{REFERENCE_PREFIX}{digits[-8:]}", digits


def allocate_identifiers(*, epoch_ms: int | None = None) -> tuple[str, str]:
    ms = _epoch_ms() if epoch_ms is None else epoch_ms

    while True:
        reference_number, barcode = identifiers_for(ms)
        taken = Bill.objects.filter(
            Q(reference_number=reference_number) | Q(barcode=barcode)
        ).exists()
        if not taken:
            return reference_number, barcode
        ms += 1
