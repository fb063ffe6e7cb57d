# users/permissions.py

"""
ROLE PERMISSIONS

The POS core never checks roles; the API layer decides who may call what.

Mapping (mirrors the shop's original access rules):
- any staff role: browse stock, run the cart, checkout, read bills
- owner / manager: edit stock items, reprint bills, read reports
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission

ROLE_OWNER = "owner"
ROLE_MANAGER = "manager"
ROLE_CASHIER = "cashier"

STAFF_ROLES = {ROLE_OWNER, ROLE_MANAGER, ROLE_CASHIER}


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated and getattr(user, "role", None) in self.allowed_roles
        )


# ---------------- ROLE PERMISSIONS ----------------
class IsPOSUser(HasRole):
    """
    Any staff member allowed to operate the till.
    """

    allowed_roles = STAFF_ROLES


class IsOwnerOrManager(HasRole):
    allowed_roles = {ROLE_OWNER, ROLE_MANAGER}


class IsOwnerOrManagerOrReadOnly(BasePermission):
    """
    Staff can read; only owner / manager can write.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return IsPOSUser().has_permission(request, view)
        return IsOwnerOrManager().has_permission(request, view)
