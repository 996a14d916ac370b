from django.core.exceptions import ImproperlyConfigured

from .base import *

DEBUG = False

# À configurer explicitement en prod
ALLOWED_HOSTS = [h for h in ALLOWED_HOSTS if h]
CSRF_TRUSTED_ORIGINS = [SITE_URL] if SITE_URL.startswith("https://") else []

# Secrets obligatoires
if SECRET_KEY == "change-me":
    raise ImproperlyConfigured("SECRET_KEY must be set in production")
for _name in ("STRIPE_SECRET_KEY", "STRIPE_WEBHOOK_SECRET"):
    if not globals()[_name]:
        raise ImproperlyConfigured(f"{_name} must be set in production")
if not USE_MOCK_AI and not GEMINI_API_KEY:
    raise ImproperlyConfigured("GEMINI_API_KEY must be set when USE_MOCK_AI is off")

# Cookies sécurisés (admin Django uniquement, l'API est en Bearer)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_SSL_REDIRECT = env_bool("SECURE_SSL_REDIRECT", True)
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SECURE_REFERRER_POLICY = "same-origin"
SECURE_CONTENT_TYPE_NOSNIFF = True

# Logging JSON forcé
LOGGING["handlers"]["console"]["formatter"] = "json"
