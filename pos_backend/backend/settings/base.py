"""
PATH: backend/settings/base.py

BASE SETTINGS (shared by dev + prod)

Operational maturity:
- Throttling
- Shop identity is injected configuration (receipt header / API root only)
- Sale commit retry budget for transient database errors
- Sentry (optional): error visibility in production
"""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import environ
from corsheaders.defaults import default_headers, default_methods

# -----------------------------------------
# BASE DIRECTORY
# -----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# -----------------------------------------
# TEST MODE DETECTION
# -----------------------------------------
TESTING = "test" in sys.argv or "pytest" in sys.modules

# -----------------------------------------
# ENV (django-environ)
# -----------------------------------------
env = environ.Env(
    DEBUG=(bool, True),
    SECRET_KEY=(str, ""),
    TIME_ZONE=(str, "UTC"),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1", "testserver"]),
    CORS_ALLOWED_ORIGINS=(list, ["http://localhost:5173"]),
    CSRF_TRUSTED_ORIGINS=(list, ["http://localhost:5173"]),
    DATABASE_URL=(str, f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
    LOG_LEVEL=(str, "INFO"),
    ADMIN_PATH=(str, "admin/"),
    # Throttling
    THROTTLE_ANON_RATE=(str, "60/min"),
    THROTTLE_USER_RATE=(str, "600/min"),
    # Shop identity (printed on receipts, never read by the sale committer)
    SHOP_NAME=(str, "Newsiri Trade Center"),
    SHOP_ADDRESS=(str, ""),
    SHOP_PHONE=(str, ""),
    CURRENCY_SYMBOL=(str, "Rs."),
    # Sale commit: attempts for transient DB errors (lock timeouts, id collisions)
    SALE_COMMIT_MAX_ATTEMPTS=(int, 3),
    # Sentry (optional; enable by setting SENTRY_DSN)
    SENTRY_DSN=(str, ""),
    SENTRY_ENVIRONMENT=(str, "development"),
    SENTRY_TRACES_SAMPLE_RATE=(float, 0.0),
    SENTRY_SEND_PII=(bool, False),
)

# -----------------------------------------
# LOAD .env
# -----------------------------------------
env_file_1 = BASE_DIR / ".env"
env_file_2 = BASE_DIR.parent / ".env"

if env_file_1.exists():
    env.read_env(str(env_file_1))
elif env_file_2.exists():
    env.read_env(str(env_file_2))

# -----------------------------------------
# CORE SECURITY
# -----------------------------------------
SECRET_KEY = (env("SECRET_KEY") or "dev-insecure-change-me").strip()
DEBUG = env.bool("DEBUG")
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")

# -----------------------------------------
# I18N / TZ
# -----------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = (env("TIME_ZONE") or "UTC").strip()
USE_I18N = True
USE_TZ = True

# -----------------------------------------
# AUTH USER MODEL (custom)
# -----------------------------------------
AUTH_USER_MODEL = "users.User"

# -----------------------------------------
# INSTALLED APPS
# -----------------------------------------
INSTALLED_APPS = [
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",
    "django_filters",
    "users.apps.UsersConfig",
    "inventory.apps.InventoryConfig",
    "sales.apps.SalesConfig",
    "pos.apps.PosConfig",
]

# -----------------------------------------
# MIDDLEWARE
# -----------------------------------------
MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "backend.urls"
ADMIN_PATH = (env("ADMIN_PATH") or "admin/").strip()
WSGI_APPLICATION = "backend.wsgi.application"
APPEND_SLASH = True

# -----------------------------------------
# TEMPLATES (required for Django admin)
# -----------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [str(BASE_DIR / "templates")],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

# -----------------------------------------
# REST FRAMEWORK
# -----------------------------------------
# SessionAuthentication comes second: the POS cart lives in the cashier's
# Django session, so the browser terminal authenticates with its session.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "DEFAULT_FILTER_BACKENDS": ("django_filters.rest_framework.DjangoFilterBackend",),
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_THROTTLE_CLASSES": (
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ),
    "DEFAULT_THROTTLE_RATES": {
        "anon": env("THROTTLE_ANON_RATE"),
        "user": env("THROTTLE_USER_RATE"),
    },
}

# -----------------------------------------
# SIMPLE JWT
# -----------------------------------------
SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=30),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=1),
    "ROTATE_REFRESH_TOKENS": True,
}

# -----------------------------------------
# DATABASE
# -----------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL"),
}

# -----------------------------------------
# SHOP CONFIGURATION (injected)
# -----------------------------------------
SHOP = {
    "NAME": (env("SHOP_NAME") or "").strip(),
    "ADDRESS": (env("SHOP_ADDRESS") or "").strip(),
    "PHONE": (env("SHOP_PHONE") or "").strip(),
    "CURRENCY_SYMBOL": (env("CURRENCY_SYMBOL") or "").strip(),
}

# -----------------------------------------
# SALE COMMIT
# -----------------------------------------
SALE_COMMIT_MAX_ATTEMPTS = max(1, env.int("SALE_COMMIT_MAX_ATTEMPTS"))

# -----------------------------------------
# LOGGING
# -----------------------------------------
LOG_LEVEL = (env("LOG_LEVEL") or "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "sales": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "pos": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "inventory": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

# -----------------------------------------
# SENTRY (optional)
# -----------------------------------------
SENTRY_DSN = (env("SENTRY_DSN") or "").strip()
SENTRY_ENVIRONMENT = (env("SENTRY_ENVIRONMENT") or "development").strip()
SENTRY_TRACES_SAMPLE_RATE = float(env("SENTRY_TRACES_SAMPLE_RATE"))
SENTRY_SEND_PII = env.bool("SENTRY_SEND_PII")

if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        integrations=[DjangoIntegration()],
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=SENTRY_SEND_PII,
    )

# -----------------------------------------
# CORS / CSRF
# -----------------------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS")
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = list(default_methods)
CORS_ALLOW_HEADERS = list(default_headers)

CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS")

# -----------------------------------------
# STATIC FILES
# -----------------------------------------
STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------
# SWAGGER
# -----------------------------------------
SPECTACULAR_SETTINGS = {
    "TITLE": "Shop POS API",
    "DESCRIPTION": "Catalog, cart, checkout, bills and sales reporting for a single shop",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}
