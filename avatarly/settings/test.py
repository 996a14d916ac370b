import tempfile

from .base import *

DEBUG = False
SECRET_KEY = "test-secret-key"
ALLOWED_HOSTS = ["testserver", "127.0.0.1", "localhost"]

# TEST_DATABASE_URL=postgres://... active les tests de concurrence (select_for_update)
DATABASES = {
    "default": parse_database_url(env("TEST_DATABASE_URL")) if env("TEST_DATABASE_URL") else {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Pas de Redis en test: le throttle devient un no-op
CACHES = {"default": {"BACKEND": "django.core.cache.backends.dummy.DummyCache"}}

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix="avatarly-media-"))
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

USE_MOCK_AI = True
MOCK_AI_DELAY_MS = 0
GEMINI_API_KEY = ""

STRIPE_SECRET_KEY = "sk_test_dummy"
STRIPE_WEBHOOK_SECRET = "whsec_test_secret"

SITE_FREE_DAILY_LIMIT = 10
CREDIT_USD_VALUE = 0.05
PROFIT_MULTIPLIER = 3.0
GEMINI_INPUT_USD_PER_1M = 0.35
GEMINI_OUTPUT_USD_PER_1M = 0.7
MIN_CREDITS_PER_GENERATION = 1
AI_OUTPUT_TOKENS_ESTIMATE = 2000

CREDIT_PACKS = {
    "small": {"price_id": "price_small", "credits": 100},
    "medium": {"price_id": "price_medium", "credits": 500},
    "large": {"price_id": "", "credits": 2000},
}

LOGGING["handlers"]["console"]["formatter"] = "simple"
for _logger in LOGGING["loggers"].values():
    _logger["level"] = "WARNING"
