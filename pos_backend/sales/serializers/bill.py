# sales/serializers/bill.py

from rest_framework import serializers

from sales.models import Bill, BillLine


class BillLineSerializer(serializers.ModelSerializer):
    """
    Bill line (read-only snapshot).
    """

    class Meta:
        model = BillLine
        fields = [
            "id",
            "stock_item",
            "item_name",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class BillSerializer(serializers.ModelSerializer):
    """
    Canonical Bill serializer: history, receipts and checkout responses.
    """

    lines = BillLineSerializer(many=True, read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Bill
        fields = [
            "id",
            "reference_number",
            "barcode",
            "status",
            "customer_name",
            "subtotal",
            "discount_kind",
            "discount_value",
            "discount_amount",
            "total",
            "paid_amount",
            "change_amount",
            "created_at",
            "created_by",
            "created_by_name",
            "lines",
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        user = getattr(obj, "created_by", None)
        return user.display_name if user is not None else None
