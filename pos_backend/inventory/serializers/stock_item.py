# inventory/serializers/stock_item.py

"""
STOCK ITEM SERIALIZER

GUARANTEES:
- current_stock is reported as stored (single source of truth)
- is_low_stock / in_stock are derived, never written
- barcode "" is normalized to NULL so the unique index only covers real codes
"""

from rest_framework import serializers

from inventory.models import StockItem


class StockItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = StockItem
        fields = [
            "id",
            "name",
            "category",
            "retail_price",
            "unit_cost",
            "current_stock",
            "low_stock_alert",
            "barcode",
            "received_date",
            "expiry_date",
            "is_low_stock",
            "in_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "is_low_stock",
            "in_stock",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {
            "barcode": {"required": False, "allow_null": True, "allow_blank": True},
        }

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("name is required")
        return value

    def validate_retail_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("retail_price must be non-negative")
        return value

    def validate_unit_cost(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("unit_cost must be non-negative")
        return value

    def validate_barcode(self, value):
        return (value or "").strip() or None

    def validate(self, attrs):
        received = attrs.get("received_date", getattr(self.instance, "received_date", None))
        expiry = attrs.get("expiry_date", getattr(self.instance, "expiry_date", None))
        if received and expiry and expiry < received:
            raise serializers.ValidationError(
                {"expiry_date": "expiry_date cannot precede received_date"}
            )
        return attrs
