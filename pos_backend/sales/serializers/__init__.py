from .bill import BillLineSerializer, BillSerializer

__all__ = [
    "BillSerializer",
    "BillLineSerializer",
]
