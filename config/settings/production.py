#config/settings/production.py
from .base import *  # noqa

# ========================================
# SECURITY SETTINGS
# ========================================

DEBUG = False

if not env("DJANGO_SECRET_KEY", default=None):
    raise ValueError("DJANGO_SECRET_KEY is not set")

# ========================================
# SSL/HTTPS Configuration
# ========================================

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

# Can be disabled when the proxy already redirects
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "SAMEORIGIN"
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"

# ========================================
# Logging (JSON to stdout)
# ========================================

LOGGING["handlers"]["console"]["formatter"] = "json"
