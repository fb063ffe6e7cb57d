# pos/views/api.py

"""
POS API VIEWS

Purpose:
- Session-scoped cart lifecycle (add / update / remove / discount / customer / clear)
- Cart refresh against live stock and "import previous bill"
- Checkout: hands the cart snapshot + paid amount to the sale committer

Hard rules:
- The cart lives in the cashier's session, never in the database.
- Money is server-owned: unit prices are snapshotted from the stock item on add.
- The cart is cleared only after a successful commit; on any failure it is
  left exactly as it was.
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.models import StockItem
from inventory.services.stock import find_by_barcode, get_live_items
from pos.cart import CartLineNotFound, CartStockLimitError, InvalidDiscountError
from pos.serializers import (
    AddCartItemInputSerializer,
    CartDiscountInputSerializer,
    CartSerializer,
    CheckoutInputSerializer,
    CustomerInputSerializer,
    ImportBillInputSerializer,
    UpdateCartLineInputSerializer,
)
from pos.services.bill_import import load_bill_into_cart
from pos.session import load_cart, reset_cart, save_cart
from sales.models import Bill
from sales.serializers import BillSerializer
from sales.services.exceptions import (
    EmptyCartError,
    InsufficientPaymentError,
    InsufficientStockError,
    PersistenceFailure,
    SaleCommitError,
    StaleItemReferenceError,
)
from sales.services.receipt import render_receipt
from sales.services.sale_committer import commit_sale
from users.permissions import IsPOSUser

logger = logging.getLogger(__name__)


# =====================================================
# API ERROR NORMALIZATION
# =====================================================


def error_response(*, code: str, message: str, http_status: int, **details):
    payload = {"code": code, "message": message}
    payload.update(details)
    return Response({"error": payload}, status=http_status)


def _stock_limit_response(exc: CartStockLimitError):
    return error_response(
        code="STOCK_LIMIT",
        message=str(exc),
        http_status=status.HTTP_409_CONFLICT,
        item_name=exc.item_name,
        available=exc.available,
        requested=exc.requested,
    )


def _line_not_found_response(exc: CartLineNotFound):
    return error_response(
        code="LINE_NOT_FOUND",
        message=str(exc),
        http_status=status.HTTP_404_NOT_FOUND,
    )


COMMIT_ERROR_STATUS = {
    EmptyCartError: status.HTTP_400_BAD_REQUEST,
    InsufficientPaymentError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    StaleItemReferenceError: status.HTTP_409_CONFLICT,
    PersistenceFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _commit_error_response(exc: SaleCommitError):
    http_status = COMMIT_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return error_response(
        code=exc.code,
        message=str(exc),
        http_status=http_status,
        **exc.details(),
    )


def _cart_response(cart, *, http_status=status.HTTP_200_OK, **extra):
    data = dict(CartSerializer(cart).data)
    data.update(extra)
    return Response(data, status=http_status)


# =====================================================
# BASE
# =====================================================


class POSView(APIView):
    permission_classes = [IsAuthenticated, IsPOSUser]
    serializer_class = CartSerializer


# =====================================================
# CART VIEWS
# =====================================================


class CartView(POSView):
    """
    The caller's session cart (created empty on first access).
    """

    @extend_schema(
        responses={200: CartSerializer},
        description="Get the current session cart with derived totals",
    )
    def get(self, request):
        return _cart_response(load_cart(request))


class AddCartItemView(POSView):
    """
    Add a stock item (by id or scanned barcode).

    Money rule:
    - Unit price is OWNED by the stock item and snapshotted server-side.
    """

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Add a stock item to the cart (increments quantity if already present)",
        examples=[
            OpenApiExample(
                "Scan",
                value={"barcode": "4790001000011", "quantity": 1},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        stock_item_id = serializer.validated_data.get("stock_item_id")
        barcode = serializer.validated_data.get("barcode")
        quantity = serializer.validated_data["quantity"]

        if stock_item_id:
            item = get_object_or_404(StockItem, pk=stock_item_id)
        else:
            item = find_by_barcode(barcode)
            if item is None:
                return error_response(
                    code="NOT_FOUND",
                    message="No stock item with this barcode",
                    http_status=status.HTTP_404_NOT_FOUND,
                )

        cart = load_cart(request)
        try:
            cart.add_item(item, quantity)
        except CartStockLimitError as exc:
            return _stock_limit_response(exc)

        save_cart(request, cart)
        return _cart_response(cart)


class UpdateCartLineView(POSView):
    @extend_schema(
        request=UpdateCartLineInputSerializer,
        responses={200: CartSerializer},
        description="Set a line's quantity (0 removes the line)",
    )
    def patch(self, request, line_id):
        serializer = UpdateCartLineInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = load_cart(request)
        try:
            cart.set_quantity(line_id, serializer.validated_data["quantity"])
        except CartLineNotFound as exc:
            return _line_not_found_response(exc)
        except CartStockLimitError as exc:
            return _stock_limit_response(exc)

        save_cart(request, cart)
        return _cart_response(cart)


class RemoveCartLineView(POSView):
    @extend_schema(
        responses={200: CartSerializer},
        description="Remove a line from the cart",
    )
    def delete(self, request, line_id):
        cart = load_cart(request)
        try:
            cart.remove_line(line_id)
        except CartLineNotFound as exc:
            return _line_not_found_response(exc)

        save_cart(request, cart)
        return _cart_response(cart)


class CartDiscountView(POSView):
    @extend_schema(
        request=CartDiscountInputSerializer,
        responses={200: CartSerializer},
        description="Replace the cart-level discount (percentage or fixed amount)",
    )
    def post(self, request):
        serializer = CartDiscountInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = load_cart(request)
        try:
            cart.apply_discount(
                serializer.validated_data["value"],
                serializer.validated_data["kind"],
            )
        except InvalidDiscountError as exc:
            return error_response(
                code="INVALID_DISCOUNT",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        save_cart(request, cart)
        return _cart_response(cart)


class CartCustomerView(POSView):
    @extend_schema(
        request=CustomerInputSerializer,
        responses={200: CartSerializer},
        description="Set (or clear) the customer name printed on the bill",
    )
    def post(self, request):
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = load_cart(request)
        cart.set_customer_name(serializer.validated_data["customer_name"])

        save_cart(request, cart)
        return _cart_response(cart)


class RefreshCartView(POSView):
    """
    Re-read every line's price and stock from inventory.

    Lines whose item was deleted are reported under `stale_lines` so the
    cashier can remove them before checkout.
    """

    @extend_schema(
        request=None,
        responses={200: CartSerializer},
        description="Refresh cart snapshots from live stock; reports stale lines",
    )
    def post(self, request):
        cart = load_cart(request)
        stale = cart.reprice(get_live_items)
        save_cart(request, cart)

        return _cart_response(
            cart,
            stale_lines=[
                {
                    "line_id": w.line_id,
                    "item_id": w.item_id,
                    "name": w.name,
                    "message": w.message,
                }
                for w in stale
            ],
        )


class ImportBillView(POSView):
    @extend_schema(
        request=ImportBillInputSerializer,
        responses={200: CartSerializer},
        description="Re-populate the cart from a previous bill (best-effort stock checks)",
    )
    def post(self, request):
        serializer = ImportBillInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        bill_id = serializer.validated_data.get("bill_id")
        barcode = (serializer.validated_data.get("barcode") or "").strip()

        if bill_id:
            bill = get_object_or_404(Bill, pk=bill_id)
        else:
            bill = Bill.objects.filter(barcode=barcode).first()
            if bill is None:
                return error_response(
                    code="NOT_FOUND",
                    message="No bill with this barcode",
                    http_status=status.HTTP_404_NOT_FOUND,
                )

        cart = load_cart(request)
        report = load_bill_into_cart(cart=cart, bill=bill)
        save_cart(request, cart)

        return _cart_response(cart, imported=report.to_dict())


class ClearCartView(POSView):
    """
    Abandon the cart. No side effects outside the session.
    """

    @extend_schema(
        responses={200: CartSerializer},
        description="Clear all lines, discount and customer name",
    )
    def delete(self, request):
        return _cart_response(reset_cart(request))


# =====================================================
# CHECKOUT
# =====================================================


class CheckoutView(POSView):
    """
    Commit the session cart as a completed Bill.

    Calls:
    - sales.services.sale_committer.commit_sale()
    """

    @extend_schema(
        request=CheckoutInputSerializer,
        responses={201: BillSerializer},
        description="Commit the cart: revalidate stock, write the bill, decrement stock.",
        examples=[
            OpenApiExample(
                "Cash payment",
                value={"paid_amount": "500.00"},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = CheckoutInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = load_cart(request)

        try:
            bill = commit_sale(
                cart=cart,
                paid_amount=serializer.validated_data["paid_amount"],
                user=request.user,
            )
        except SaleCommitError as exc:
            logger.info(
                "Checkout refused",
                extra={"code": exc.code, "user_id": str(request.user.pk)},
            )
            return _commit_error_response(exc)

        reset_cart(request)

        data = BillSerializer(bill).data
        data["receipt_text"] = render_receipt(bill)
        return Response(data, status=status.HTTP_201_CREATED)
