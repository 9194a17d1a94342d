# config/settings/test.py
from .base import *  # noqa

# ========================================
# Database
# ========================================

# SQLite unless TEST_DATABASE_URL points somewhere else
DATABASES = {
    'default': env.db("TEST_DATABASE_URL", default=f"sqlite:///{BASE_DIR / 'test_db.sqlite3'}"),
}

# ========================================
# Migrations (Disable for tests)
# ========================================

class DisableMigrations:
    """Disable migrations for tests to speed them up."""
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None

MIGRATION_MODULES = DisableMigrations()

# ========================================
# Password Hashing (Faster for Tests)
# ========================================

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# ========================================
# Celery (Synchronous for Tests)
# ========================================

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# ========================================
# Caching (Dummy Cache for Tests)
# ========================================

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.dummy.DummyCache",
    }
}

# ========================================
# Logging (Minimal for Tests)
# ========================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",  # Only show warnings and errors in tests
    },
}

# Propagate exceptions for clearer test failures
DEBUG_PROPAGATE_EXCEPTIONS = True
