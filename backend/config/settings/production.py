"""
Production settings.

Extends base settings with hardened security, persistent connections and a
file log handler.
"""
from .base import *

DEBUG = False

# HTTPS/SSL settings
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=31536000)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])

EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"

DATABASES["default"]["CONN_MAX_AGE"] = 600
DATABASES["default"]["OPTIONS"]["sslmode"] = env("POSTGRES_SSLMODE", default="require")

STORAGES = {
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

CACHES["default"]["OPTIONS"]["IGNORE_EXCEPTIONS"] = True

CELERY_TASK_ALWAYS_EAGER = False

# The logs directory must exist and be writable by the app user.
LOG_DIR = Path(env("LOG_DIR", default=str(BASE_DIR / "logs")))
LOGGING["handlers"]["file"] = {
    "level": "WARNING",
    "class": "logging.FileHandler",
    "filename": LOG_DIR / "django.log",
    "formatter": "verbose",
}
LOGGING["loggers"]["django"]["handlers"] = ["console", "file"]
LOGGING["loggers"]["django"]["level"] = "WARNING"
LOGGING["loggers"]["backend"]["handlers"] = ["console", "file"]
