# pos/serializers/cart.py

"""
CART SERIALIZERS

Purpose:
- Return the session cart in a frontend-friendly shape.
- Totals are always derived server-side from the lines + discount.
- Input serializers for the cart / checkout endpoints.
"""

from decimal import Decimal

from rest_framework import serializers

from pos.cart import Discount


class CartLineSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    item_id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    available_stock = serializers.IntegerField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class DiscountSerializer(serializers.Serializer):
    value = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    kind = serializers.CharField(read_only=True)


class CartSerializer(serializers.Serializer):
    """
    Serializer for the session cart.

    Guarantees:
    - read-only view of pos.cart.Cart
    - totals computed on every render (never stored)
    """

    lines = CartLineSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(read_only=True)
    discount = DiscountSerializer(read_only=True)

    item_count = serializers.SerializerMethodField(read_only=True)
    totals = serializers.SerializerMethodField(read_only=True)

    def get_item_count(self, obj) -> int:
        # Units across lines (what the cashier reads off the screen)
        return sum(line.quantity for line in obj.lines)

    def get_totals(self, obj) -> dict:
        totals = obj.compute_totals()
        return {
            "subtotal": str(totals.subtotal),
            "discount_amount": str(totals.discount_amount),
            "total": str(totals.total),
        }


# =====================================================
# INPUT SERIALIZERS
# =====================================================


class AddCartItemInputSerializer(serializers.Serializer):
    stock_item_id = serializers.UUIDField(required=False, allow_null=True)
    barcode = serializers.CharField(required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=1, default=1)

    def validate(self, attrs):
        if not attrs.get("stock_item_id") and not (attrs.get("barcode") or "").strip():
            raise serializers.ValidationError("Provide stock_item_id or barcode.")
        return attrs


class UpdateCartLineInputSerializer(serializers.Serializer):
    # 0 (or less) removes the line
    quantity = serializers.IntegerField()


class CartDiscountInputSerializer(serializers.Serializer):
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    kind = serializers.ChoiceField(choices=Discount.KINDS, default=Discount.PERCENTAGE)


class CustomerInputSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=255, allow_blank=True)


class ImportBillInputSerializer(serializers.Serializer):
    bill_id = serializers.UUIDField(required=False, allow_null=True)
    barcode = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs.get("bill_id") and not (attrs.get("barcode") or "").strip():
            raise serializers.ValidationError("Provide bill_id or barcode.")
        return attrs


class CheckoutInputSerializer(serializers.Serializer):
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.00"))
