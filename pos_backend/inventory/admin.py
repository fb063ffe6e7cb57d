from django.contrib import admin

from inventory.models import StockItem


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "retail_price",
        "current_stock",
        "low_stock_alert",
        "barcode",
        "expiry_date",
    )
    list_filter = ("category",)
    search_fields = ("name", "barcode", "category")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
