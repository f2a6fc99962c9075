# salon_system/settings.py
#
# Purpose:
# - Django settings for the salon booking project.
# - Every deploy-specific value comes from an environment variable with a
#   demo-friendly default, so `python manage.py runserver` works out of the box.
#
# Notes for developers:
# - The database is a local SQLite file. Durability is not a goal of this demo;
#   tests run against Django's in-memory test database.
# - Business rules that staff may want to tune (opening hours, slot length,
#   loyalty percentages) live under the SALON_* names below.
# - The AI assistant is optional. Leave GEMINI_API_KEY empty and the assistant
#   answers with its built-in fallback text.
#
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-change-me")
DEBUG = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "booking",
    "reports",
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

ROOT_URLCONF = "salon_system.urls"

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

WSGI_APPLICATION = "salon_system.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("SALON_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("SALON_TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Customers authenticate by phone number only; the session carries the
# customer id and unsafe requests from a logged-in session need the CSRF
# token. Django's own auth users are used for /admin/ only.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "booking.authentication.CustomerSessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# -------------------------
# Salon business settings
# -------------------------
SALON_NAME = os.getenv("SALON_NAME", "Padla Hair Salon")
SALON_OPEN_HOUR = int(os.getenv("SALON_OPEN_HOUR", "10"))
SALON_CLOSE_HOUR = int(os.getenv("SALON_CLOSE_HOUR", "20"))
SALON_SLOT_MINUTES = int(os.getenv("SALON_SLOT_MINUTES", "30"))

# Loyalty: 1 point = 1 currency unit.
SALON_REDEEM_CAP_PERCENT = int(os.getenv("SALON_REDEEM_CAP_PERCENT", "50"))
SALON_EARN_PERCENT = int(os.getenv("SALON_EARN_PERCENT", "5"))

# -------------------------
# AI assistant (optional)
# -------------------------
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta/models"
)
SALON_ASSISTANT_TIMEOUT = float(os.getenv("SALON_ASSISTANT_TIMEOUT", "10"))

# -------------------------
# Logging
# -------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "booking": {
            "handlers": ["console"],
            "level": os.getenv("SALON_LOG_LEVEL", "INFO"),
        },
        "reports": {
            "handlers": ["console"],
            "level": os.getenv("SALON_LOG_LEVEL", "INFO"),
        },
    },
}
