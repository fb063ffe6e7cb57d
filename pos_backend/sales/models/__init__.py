# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .bill import Bill
from .bill_line import BillLine

__all__ = [
    "Bill",
    "BillLine",
]
