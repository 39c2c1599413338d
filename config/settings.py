# config/settings.py

import os
from pathlib import Path
from dotenv import load_dotenv

# ──────────────────────────────────────────────────────────────────────────────
# Base & Env (환경별 .env 자동 로딩)
# ──────────────────────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# DJANGO_ENV 에 따라 .env.<DJANGO_ENV> → .env 순서로 로드
# 예) dev → .env.dev, prod → .env.prod
DJANGO_ENV = os.getenv("DJANGO_ENV", "dev").strip().lower()
env_file = BASE_DIR / f".env.{DJANGO_ENV}"
if env_file.exists():
    load_dotenv(env_file, override=True)

# 공통 키 보완용(.env). 이미 로드된 값은 유지(override=False)
common_env = BASE_DIR / ".env"
if common_env.exists():
    load_dotenv(common_env, override=False)


def _flag(name: str, default: str = "0") -> bool:
    # "1/true/yes/on" 다 허용 (대소문자 무시)
    return str(os.getenv(name, default)).strip().lower() in ("1", "true", "yes", "on")


# ──────────────────────────────────────────────────────────────────────────────
# Core Settings
# ──────────────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret")
DEBUG = _flag("DEBUG", "1")
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "127.0.0.1,localhost").split(",")

# ──────────────────────────────────────────────────────────────────────────────
# Applications
# ──────────────────────────────────────────────────────────────────────────────
INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # 3rd party
    "rest_framework",
    "drf_spectacular",
    "corsheaders",

    # Domain apps
    "domains.tracking.apps.TrackingConfig",
]

# ──────────────────────────────────────────────────────────────────────────────
# Middleware
# ──────────────────────────────────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# ──────────────────────────────────────────────────────────────────────────────
# URL & Templates
# ──────────────────────────────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"
APPEND_SLASH = True

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
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

# ──────────────────────────────────────────────────────────────────────────────
# Database (PostgreSQL, DB_NAME 없으면 로컬 SQLite)
# ──────────────────────────────────────────────────────────────────────────────
if os.getenv("DB_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("DB_NAME"),
            "USER": os.getenv("DB_USER"),
            "PASSWORD": os.getenv("DB_PASSWORD"),
            "HOST": os.getenv("DB_HOST"),
            "PORT": os.getenv("DB_PORT", "5432"),
            "CONN_MAX_AGE": int(os.getenv("DJANGO_DB_CONN_MAX_AGE", "60")),
            "OPTIONS": {"sslmode": os.getenv("DJANGO_DB_SSLMODE", "require")},
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ──────────────────────────────────────────────────────────────────────────────
# Internationalization
# ──────────────────────────────────────────────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ──────────────────────────────────────────────────────────────────────────────
# Static Files
# ──────────────────────────────────────────────────────────────────────────────
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ──────────────────────────────────────────────────────────────────────────────
# DRF & OpenAPI
# ──────────────────────────────────────────────────────────────────────────────
REST_FRAMEWORK = {
    # 인증은 호출부(게이트웨이/CRUD 계층) 책임
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Freight Tracking API",
    "DESCRIPTION": "Multi-carrier shipment tracking (ocean, parcel, flight, vessel).",
    "VERSION": "1.0.0",
    "SCHEMA_PATH_PREFIX": r"/api/v1",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "DISABLE_ERRORS_AND_WARNINGS": True,
    "SWAGGER_UI_SETTINGS": {
        "deepLinking": True,
        "displayRequestDuration": True,
    },
    "SERVERS": [{"url": "/"}],
}

# ──────────────────────────────────────────────────────────────────────────────
# CORS
# ──────────────────────────────────────────────────────────────────────────────
CORS_ALLOWED_ORIGINS = [
    o for o in os.getenv(
        "CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
    ).split(",") if o
]

# ──────────────────────────────────────────────────────────────────────────────
# Tracking providers
# credential 이 비어 있으면 해당 제공자는 폴백(데모) 결과만 반환
# endpoint 를 비워두면 기본 URL 사용
# ──────────────────────────────────────────────────────────────────────────────
def _provider(prefix: str) -> dict:
    return {
        "credential": os.getenv(f"{prefix}_API_KEY", ""),
        "endpoint": os.getenv(f"{prefix}_API_URL", ""),
    }


TRACKING = {
    "HTTP_TIMEOUT": float(os.getenv("TRACKING_HTTP_TIMEOUT", "8")),
    "PROVIDERS": {
        "Maersk": _provider("MAERSK"),
        "COSCO": _provider("COSCO"),
        "FedEx": _provider("FEDEX"),
        "UPS": _provider("UPS"),
        "DHL": _provider("DHL"),
        "MSC": _provider("MSC"),
        "Vizion": _provider("VIZION"),
        "AviationStack": _provider("AVIATIONSTACK"),
        "MarineTraffic": _provider("MARINETRAFFIC"),
    },
}

# ──────────────────────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "domains.tracking": {
            "handlers": ["console"],
            "level": os.getenv("TRACKING_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

# ──────────────────────────────────────────────────────────────────────────────
# Celery Configuration
# ──────────────────────────────────────────────────────────────────────────────
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/0")
_result_env = os.environ.get("CELERY_RESULT_BACKEND")
CELERY_RESULT_BACKEND = _result_env or None
CELERY_TIMEZONE = "UTC"
CELERY_TASK_TIME_LIMIT = 60
CELERY_TASK_TRACK_STARTED = True
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_BROKER_CONNECTION_RETRY_ON_STARTUP = True
CELERY_TASK_ALWAYS_EAGER = _flag("CELERY_TASK_ALWAYS_EAGER")
