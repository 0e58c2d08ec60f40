"""Django settings for the air-quality prediction service."""
from __future__ import annotations

from pathlib import Path
import os

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "airqualify.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "airqualify.urls"

WSGI_APPLICATION = "airqualify.wsgi.application"

# Nothing is persisted beyond the cache backends below.
DATABASES: dict = {}

REDIS_URL = os.environ.get("REDIS_URL")
if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": REDIS_URL,
            "OPTIONS": {
                "CLIENT_CLASS": "django_redis.client.DefaultClient",
            },
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "airqualify-local",
            "OPTIONS": {"MAX_ENTRIES": 10000},
        }
    }

PREDICTION_CACHE_ALIAS = os.environ.get("PREDICTION_CACHE_ALIAS", "default")
PREDICTION_CACHE_TTL = int(os.environ.get("PREDICTION_CACHE_TTL", "60"))
HISTORY_TTL = int(os.environ.get("HISTORY_TTL", str(24 * 60 * 60)))
HISTORY_MAX_ENTRIES = int(os.environ.get("HISTORY_MAX_ENTRIES", "30"))
COORDINATE_PRECISION = int(os.environ.get("COORDINATE_PRECISION", "4"))

MODEL_PATH = os.environ.get("AIRQUALIFY_MODEL_PATH", str(BASE_DIR / "model" / "rf_model.onnx"))
MODEL_AUTOLOAD = os.environ.get("AIRQUALIFY_MODEL_AUTOLOAD", "1") == "1"

OPENAQ_URL = os.environ.get("OPENAQ_URL", "https://api.openaq.org/v2/latest")
OPENAQ_API_KEY = os.environ.get("OPENAQ_API_KEY", "").strip()
OPENAQ_RADIUS = int(os.environ.get("OPENAQ_RADIUS", "5000"))
OPENMETEO_URL = os.environ.get("OPENMETEO_URL", "https://api.open-meteo.com/v1/forecast")
UPSTREAM_TIMEOUT = float(os.environ.get("UPSTREAM_TIMEOUT", "5"))
UPSTREAM_RETRIES = int(os.environ.get("UPSTREAM_RETRIES", "2"))
AGGREGATOR_TIMEOUT = float(os.environ.get("AGGREGATOR_TIMEOUT", "15"))

# When set, /api/alerts asks this prediction endpoint instead of the local service.
PREDICT_URL = os.environ.get("AIRQUALIFY_PREDICT_URL", "").strip()

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
}

LOG_LEVEL = os.environ.get("AIRQUALIFY_LOG_LEVEL", "INFO").upper()
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "urllib3": {"level": "WARNING"},
    },
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True
