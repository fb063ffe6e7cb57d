# pos/session.py

"""
SESSION CART STORE

The cart belongs to one cashier session and lives in that Django session
(JSON-serialized). Nothing here touches the domain tables.

Ownership:
- The stored payload carries the pk of the user who built the cart.
- A terminal keeps its session cookie across JWT logins, so a cart owned by
  someone else is never handed back; the caller starts from an empty cart.
"""

from __future__ import annotations

from pos.cart import Cart

SESSION_KEY = "pos_cart"


def _owner_key(request) -> str | None:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return str(user.pk)


def load_cart(request) -> Cart:
    payload = request.session.get(SESSION_KEY) or {}
    owner = _owner_key(request)

    if owner is None or payload.get("owner") != owner:
        return Cart()
    return Cart.from_dict(payload.get("cart"))


def save_cart(request, cart: Cart) -> None:
    request.session[SESSION_KEY] = {
        "owner": _owner_key(request),
        "cart": cart.to_dict(),
    }
    request.session.modified = True


def reset_cart(request) -> Cart:
    cart = Cart()
    save_cart(request, cart)
    return cart
