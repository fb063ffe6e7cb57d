from .stock_item import StockItemSerializer

__all__ = [
    "StockItemSerializer",
]
