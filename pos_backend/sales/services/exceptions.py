# sales/services/exceptions.py

"""
SALE COMMIT ERRORS

Raised by the sale committer. Each carries a stable `code` and the details
the till needs to explain the failure; the API turns them into
{"error": {"code", "message", ...details}} payloads.
"""

from __future__ import annotations

from decimal import Decimal


class SaleCommitError(Exception):
    code = "SALE_COMMIT_FAILED"

    def details(self) -> dict:
        return {}


class EmptyCartError(SaleCommitError):
    code = "EMPTY_CART"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InsufficientPaymentError(SaleCommitError):
    code = "INSUFFICIENT_PAYMENT"

    def __init__(self, shortfall: Decimal):
        self.shortfall = shortfall
        super().__init__(f"Paid amount is short by {shortfall}")

    def details(self) -> dict:
        return {"shortfall": str(self.shortfall)}


class InsufficientStockError(SaleCommitError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_name: str, available: int, requested: int):
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for '{item_name}'. "
            f"Available: {available}, requested: {requested}"
        )

    def details(self) -> dict:
        return {
            "item_name": self.item_name,
            "available": self.available,
            "requested": self.requested,
        }


class StaleItemReferenceError(SaleCommitError):
    code = "STALE_ITEM"

    def __init__(self, item_name: str, item_id: str):
        self.item_name = item_name
        self.item_id = item_id
        super().__init__(f"'{item_name}' no longer exists in inventory. Remove it from the cart.")

    def details(self) -> dict:
        return {"item_name": self.item_name, "item_id": self.item_id}


class PersistenceFailure(SaleCommitError):
    code = "PERSISTENCE_FAILURE"

    def __init__(self, message: str = "Sale not completed; nothing was charged", attempts: int = 1):
        self.attempts = attempts
        super().__init__(message)

    def details(self) -> dict:
        return {"attempts": self.attempts}
