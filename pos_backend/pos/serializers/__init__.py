from .cart import (
    AddCartItemInputSerializer,
    CartDiscountInputSerializer,
    CartSerializer,
    CheckoutInputSerializer,
    CustomerInputSerializer,
    ImportBillInputSerializer,
    UpdateCartLineInputSerializer,
)

__all__ = [
    "CartSerializer",
    "AddCartItemInputSerializer",
    "UpdateCartLineInputSerializer",
    "CartDiscountInputSerializer",
    "CustomerInputSerializer",
    "ImportBillInputSerializer",
    "CheckoutInputSerializer",
]
