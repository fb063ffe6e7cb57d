# sales/admin.py

from django.contrib import admin

from sales.models import Bill, BillLine


# ======================================================
# BILL ADMIN (read-only: bills are written by checkout)
# ======================================================


class BillLineInline(admin.TabularInline):
    model = BillLine
    extra = 0
    can_delete = False
    fields = ("item_name", "quantity", "unit_price", "line_total", "stock_item")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = (
        "reference_number",
        "status",
        "customer_name",
        "total",
        "created_by",
        "created_at",
    )
    search_fields = ("reference_number", "barcode", "customer_name")
    list_filter = ("status", "created_at")
    inlines = [BillLineInline]

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
