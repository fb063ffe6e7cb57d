"""
PATH: pos/urls.py

POS URLS

Purpose:
- Session cart lifecycle
- Cart line operations
- Checkout (commits the cart via the sale committer)
"""

from django.urls import path

from pos.views.api import (
    AddCartItemView,
    CartCustomerView,
    CartDiscountView,
    CartView,
    CheckoutView,
    ClearCartView,
    ImportBillView,
    RefreshCartView,
    RemoveCartLineView,
    UpdateCartLineView,
)

app_name = "pos"

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/clear/", ClearCartView.as_view(), name="clear-cart"),
    path("cart/refresh/", RefreshCartView.as_view(), name="refresh-cart"),
    path("cart/discount/", CartDiscountView.as_view(), name="cart-discount"),
    path("cart/customer/", CartCustomerView.as_view(), name="cart-customer"),
    path("cart/import-bill/", ImportBillView.as_view(), name="import-bill"),

    path("cart/items/add/", AddCartItemView.as_view(), name="add-cart-item"),
    path("cart/lines/<str:line_id>/", UpdateCartLineView.as_view(), name="update-cart-line"),
    path("cart/lines/<str:line_id>/remove/", RemoveCartLineView.as_view(), name="remove-cart-line"),

    path("checkout/", CheckoutView.as_view(), name="checkout"),
]
