"""
Django settings for the salon booking project.

Values come from the environment; defaults suit local development and tests.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes", "on")


def env_list(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-not-secret")
DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = env_list("DJANGO_ALLOWED_HOSTS", ["localhost", "127.0.0.1", "testserver"])

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "salon.catalog",
    "salon.clients",
    "salon.appointments",
    "salon.notifications",
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

ROOT_URLCONF = "config.urls"

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

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": os.getenv("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.getenv("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.getenv("DB_USER", ""),
        "PASSWORD": os.getenv("DB_PASSWORD", ""),
        "HOST": os.getenv("DB_HOST", ""),
        "PORT": os.getenv("DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
# Single implicit local zone for all appointment dates and times
TIME_ZONE = os.getenv("SALON_TIME_ZONE", "Asia/Jerusalem")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
LOGIN_URL = "/accounts/login/"

# ---------------------------------------------------------------------------
# Salon
# ---------------------------------------------------------------------------
SALON_NAME = os.getenv("SALON_NAME", "Hair Studio")
SALON_ICS_DOMAIN = os.getenv("SALON_ICS_DOMAIN", "salon.local")
# "ignore" counts unknown service ids as zero minutes, "reject" refuses them
SALON_MISSING_SERVICE_POLICY = os.getenv("SALON_MISSING_SERVICE_POLICY", "ignore")
SALON_BOOKING_INITIAL_STATUS = os.getenv("SALON_BOOKING_INITIAL_STATUS", "confirmed")
SALON_CALENDAR_BASE_HOUR = int(os.getenv("SALON_CALENDAR_BASE_HOUR", "8"))
SALON_CALENDAR_HOUR_HEIGHT = int(os.getenv("SALON_CALENDAR_HOUR_HEIGHT", "80"))
SALON_CALENDAR_INSET = int(os.getenv("SALON_CALENDAR_INSET", "8"))

# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
NOTIFICATIONS_ENABLED = env_bool("NOTIFICATIONS_ENABLED", True)
SALON_NOTIFICATION_CHANNELS = env_list("SALON_NOTIFICATION_CHANNELS", ["webhook"])
SALON_WEBHOOK_URL = os.getenv("SALON_WEBHOOK_URL", "")
SALON_WEBHOOK_API_KEY = os.getenv("SALON_WEBHOOK_API_KEY", "")
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_WHATSAPP_FROM = os.getenv("TWILIO_WHATSAPP_FROM", "")

# ---------------------------------------------------------------------------
# Celery
# ---------------------------------------------------------------------------
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "memory://")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", None)
CELERY_TASK_ALWAYS_EAGER = env_bool("CELERY_TASK_ALWAYS_EAGER", False)
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
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
        "salon": {
            "handlers": ["console"],
            "level": os.getenv("SALON_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
