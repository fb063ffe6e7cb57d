# sales/tests/helpers.py

from decimal import Decimal

from django.contrib.auth import get_user_model

from inventory.models import StockItem
from pos.cart import Cart
from sales.models import Bill, BillLine

User = get_user_model()


def make_user(*, email="cashier@example.com", role="cashier", password="pass"):
    return User.objects.create_user(email=email, password=password, role=role)


def make_item(*, name="Pen", price="100.00", stock=10, **extra):
    return StockItem.objects.create(
        name=name,
        retail_price=Decimal(price),
        current_stock=stock,
        **extra,
    )


def cart_with(*pairs, discount=None, customer_name=""):
    """
    cart_with((item, qty), ...) -> Cart
    """
    cart = Cart()
    for item, qty in pairs:
        cart.add_item(item, qty)
    if discount is not None:
        cart.apply_discount(*discount)
    cart.set_customer_name(customer_name)
    return cart


def snapshot():
    """
    Everything a commit may touch: bill rows, line rows and stock levels.
    """
    return {
        "bills": list(Bill.objects.order_by("pk").values_list("pk", flat=True)),
        "lines": BillLine.objects.count(),
        "stock": dict(StockItem.objects.values_list("pk", "current_stock")),
    }
