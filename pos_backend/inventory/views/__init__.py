from .stock_item import StockItemViewSet

__all__ = [
    "StockItemViewSet",
]
