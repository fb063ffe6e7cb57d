"""
BILL LIFECYCLE DOMAIN RULES

A bill is written once, as completed. The only allowed change afterwards is
marking it reprinted when the receipt is printed again.
"""

import logging

from django.db import transaction

from sales.models import Bill

logger = logging.getLogger(__name__)

# ============================================================
# DOMAIN ERRORS
# ============================================================


class BillLifecycleError(Exception):
    pass


class InvalidBillTransitionError(BillLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

ALLOWED_TRANSITIONS = Bill.STATUS_TRANSITIONS


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, bill: Bill, target_status: str):
    if not can_transition(from_status=bill.status, to_status=target_status):
        raise InvalidBillTransitionError(
            f"Bill {bill.reference_number} cannot transition from "
            f"'{bill.status}' to '{target_status}'"
        )


@transaction.atomic
def reprint_bill(*, bill: Bill) -> Bill:
    """
    Mark a bill reprinted. Reprinting an already reprinted bill is a no-op.
    """
    bill = Bill.objects.select_for_update().get(pk=bill.pk)

    if bill.status == Bill.STATUS_REPRINTED:
        return bill

    validate_transition(bill=bill, target_status=Bill.STATUS_REPRINTED)

    bill.status = Bill.STATUS_REPRINTED
    bill.save(update_fields=["status"])

    logger.info(
        "Bill reprinted",
        extra={"bill_id": str(bill.id), "reference_number": bill.reference_number},
    )
    return bill
