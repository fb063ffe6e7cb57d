"""
PATH: users/models/user.py

CUSTOM USER MODEL

The shop's staff accounts. Authentication screens live outside this backend;
what the POS core needs from a user is:
- a stable identity (stamped on every bill as created_by)
- a role (owner / manager / cashier) used by the API permission classes
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email=None, password=None, **extra_fields):
        """
        Email is the login identity.

        Tests and seed scripts may pass username=...; it only seeds the email
        (<username>@local.test) when no email is given.
        """
        username = (extra_fields.pop("username", "") or "").strip()
        email = (email or "").strip()

        if not email:
            if not username:
                raise ValueError("An email address is required (or provide username=...)")
            email = f"{username.lower()}@local.test"

        email = self.normalize_email(email)
        extra_fields.setdefault("is_active", True)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Superuser must have an email")
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", self.model.ROLE_OWNER)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_OWNER = "owner"
    ROLE_MANAGER = "manager"
    ROLE_CASHIER = "cashier"

    ROLE_CHOICES = [
        (ROLE_OWNER, "Owner"),
        (ROLE_MANAGER, "Manager"),
        (ROLE_CASHIER, "Cashier"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(unique=True)

    name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=32, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CASHIER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        if not self.email:
            raise ValidationError({"email": "email is required"})

    @property
    def display_name(self) -> str:
        return (self.name or "").strip() or self.email

    def __str__(self):
        return f"{self.email} ({self.role})"
