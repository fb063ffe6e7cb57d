# users/urls.py

from django.urls import path

from .views import MeView

app_name = "users"

urlpatterns = [
    # ---------------- AUTHENTICATED ----------------
    path("me/", MeView.as_view(), name="me"),
]
