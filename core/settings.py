"""Django settings for the Fast Delivery backend.

All deployment-specific values come from the environment. A local `.env`
file is loaded first if present.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def _env(key, default=None):
    value = os.getenv(key, default)
    return value.strip() if isinstance(value, str) else value


def _env_bool(key, default=False):
    return str(os.getenv(key, str(default))).lower() in ("true", "1", "yes", "on")


def _env_int(key, default):
    value = os.getenv(key)
    return int(value) if value else default


def _env_list(key, default=""):
    return [v.strip() for v in os.getenv(key, default).split(",") if v.strip()]


# --------------------------------- core ---------------------------------

SECRET_KEY = _env("SECRET_KEY", "dev-only-secret-key-change-me")
DEBUG = _env_bool("DEBUG", False)
ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", "localhost,127.0.0.1")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework.authtoken",
    "common",
    "profiles",
    "user_auth_app",
    "availability",
    "notifications",
    "orders",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "core.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": _env("DATABASE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

LANGUAGE_CODE = "en-us"
USE_I18N = True
USE_TZ = True
TIME_ZONE = "UTC"

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.TokenAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
}

# ------------------------------- service -------------------------------

# All availability and "today" decisions are made in this zone.
SERVICE_TIME_ZONE = _env("SERVICE_TIME_ZONE", "Africa/Addis_Ababa")

# Public frontend base; tracking links are <base>/track/<code>.
TRACKING_BASE_URL = _env("TRACKING_BASE_URL", "http://localhost:5173").rstrip("/")

# --------------------------------- sms ---------------------------------

SMS_PROVIDER = _env("SMS_PROVIDER", "mock").lower()
SMS_TIMEOUT_SECONDS = _env_int("SMS_TIMEOUT_SECONDS", 10)

TWILIO_ACCOUNT_SID = _env("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = _env("TWILIO_AUTH_TOKEN")
TWILIO_MESSAGING_SERVICE_SID = _env("TWILIO_MESSAGING_SERVICE_SID")
TWILIO_FROM_NUMBER = _env("TWILIO_FROM_NUMBER")

NOTIFICATIONS_RUN_INLINE = _env_bool("NOTIFICATIONS_RUN_INLINE", False)
NOTIFICATION_WORKERS = _env_int("NOTIFICATION_WORKERS", 4)

BROADCAST_EXCLUDED_NUMBERS = _env_list("BROADCAST_EXCLUDED_NUMBERS")
BROADCAST_MAX_WORKERS = _env_int("BROADCAST_MAX_WORKERS", 8)
BROADCAST_RETRY_DELAY_SECONDS = _env_int("BROADCAST_RETRY_DELAY_SECONDS", 600)
BROADCAST_RETRY_LEASE_SECONDS = _env_int("BROADCAST_RETRY_LEASE_SECONDS", 300)
BROADCAST_IN_PROCESS_RETRY = _env_bool("BROADCAST_IN_PROCESS_RETRY", True)

# ------------------------------- logging -------------------------------

LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}
