"""
Testing settings.
"""
from .base import *

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

AUTH_PASSWORD_VALIDATORS = []

# Faster password hashing for testing
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
ADMIN_NOTIFICATION_EMAIL = "alerts@iptv-platform.example"

# Tasks run inline; failures surface to the caller's error handling
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]["guest_checkout"] = "1000/hour"

CORS_ALLOW_ALL_ORIGINS = True

LOGGING["loggers"]["backend"]["level"] = "WARNING"

TEST_RUNNER = "django.test.runner.DiscoverRunner"
